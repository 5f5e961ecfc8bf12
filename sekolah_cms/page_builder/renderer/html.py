"""
HTML renderer — one render function per block type.
Pure: the only inputs are the block and, for embed blocks, the records the
caller resolved beforehand (`embeds`, keyed by block id).
"""
import re
from html import escape
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from ...security import clean_text, sanitize_url
from ..blocks import (
    BLOCK_DATA, Block, BlockData, load_blocks, parse_data,
    HeadingData, ParagraphData, QuoteData, ListData, CalloutData, DividerData, SpacerData,
    ImageData, VideoData, HeroData, ColumnsData, StatsCounterData, TimelineData, CTAData,
    StaffGridData, NewsListData, GalleryEmbedData, TestimonialSliderData, ContactFormData,
    GoogleMapData, ProgramCardsData, FacilityShowcaseData, EventCalendarData,
    DownloadListData, AchievementListData,
)

Embeds = Mapping[str, List[Dict[str, Any]]]

# ── Presentation rules ─────────────────────────────────────────────────────────

HEADING_SIZES = {
    1: "text-4xl md:text-5xl",
    2: "text-3xl md:text-4xl",
    3: "text-2xl md:text-3xl",
    4: "text-xl md:text-2xl",
    5: "text-lg md:text-xl",
    6: "text-base md:text-lg",
}

CALLOUT_STYLES = {
    "info":    {"color": "blue",   "icon": "ℹ️"},
    "warning": {"color": "yellow", "icon": "⚠️"},
    "success": {"color": "green",  "icon": "✅"},
    "error":   {"color": "red",    "icon": "❌"},
    "tip":     {"color": "purple", "icon": "💡"},
}

SPACER_HEIGHTS = {"sm": "1rem", "md": "2rem", "lg": "4rem", "xl": "6rem"}
GAP_SIZES = {"sm": "0.5rem", "md": "1.5rem", "lg": "3rem"}
ALIGNMENTS = ("left", "center", "right", "justify", "full")


def _t(value) -> str:
    """Cleaned + escaped text."""
    return escape(clean_text(value))


def _url(value) -> str:
    return escape(sanitize_url(value), quote=True)


def _align(value) -> str:
    return value if value in ALIGNMENTS else "left"


def _level(value) -> int:
    return value if isinstance(value, int) and 1 <= value <= 6 else 2


def _number(value) -> str:
    """Thousands separated the Indonesian way (1.250)."""
    if not isinstance(value, (int, float)):
        return "0"
    if float(value).is_integer():
        return f"{int(value):,}".replace(",", ".")
    return f"{value:,.1f}".replace(",", "X").replace(".", ",").replace("X", ".")


def _paragraphs(text) -> str:
    return "<br>".join(_t(line) for line in clean_text(text).split("\n"))


def video_embed_url(url: str, video_type: str) -> str:
    """YouTube / Vimeo watch URLs → embed URLs; anything else is returned as is."""
    if video_type == "youtube":
        m = re.search(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&\s]+)", url)
        if m:
            return f"https://www.youtube.com/embed/{m.group(1)}"
    if video_type == "vimeo":
        m = re.search(r"vimeo\.com/(\d+)", url)
        if m:
            return f"https://player.vimeo.com/video/{m.group(1)}"
    return url


# ── Content blocks ─────────────────────────────────────────────────────────────

def render_heading(b: Block, d: HeadingData, embeds: Embeds) -> str:
    level = _level(d.level)
    return (f'<h{level} class="block-heading {HEADING_SIZES[level]} text-{_align(d.align)}">'
            f'{_t(d.text)}</h{level}>')


def render_paragraph(b: Block, d: ParagraphData, embeds: Embeds) -> str:
    return f'<p class="block-paragraph text-{_align(d.align)}">{_paragraphs(d.text)}</p>'


def render_image(b: Block, d: ImageData, embeds: Embeds) -> str:
    src = _url(d.src)
    if not src:
        return ""
    alt = _t(d.alt) or "Image"
    size = ""
    if d.width and d.height:
        size = f' width="{int(d.width)}" height="{int(d.height)}"'
    caption = f'\n  <figcaption class="block-image__caption">{_t(d.caption)}</figcaption>' if clean_text(d.caption) else ""
    return (f'<figure class="block-image block-image--{_align(d.align)}">\n'
            f'  <img src="{src}" alt="{alt}"{size} loading="lazy">{caption}\n</figure>')


def render_video(b: Block, d: VideoData, embeds: Embeds) -> str:
    src = sanitize_url(d.src)
    if not src:
        return ""
    video_type = d.type or "youtube"
    embed_url = src if video_type == "file" else video_embed_url(src, video_type)
    if not embed_url.startswith("https://"):
        return ""
    if video_type == "file":
        player = f'<video src="{escape(embed_url, quote=True)}" controls class="block-video__player"></video>'
    else:
        player = (f'<iframe src="{escape(embed_url, quote=True)}" class="block-video__player" allowfullscreen '
                  f'loading="lazy" referrerpolicy="strict-origin-when-cross-origin"></iframe>')
    caption = f'\n  <figcaption class="block-video__caption">{_t(d.caption)}</figcaption>' if clean_text(d.caption) else ""
    return f'<figure class="block-video">\n  {player}{caption}\n</figure>'


def render_quote(b: Block, d: QuoteData, embeds: Embeds) -> str:
    footer = ""
    if clean_text(d.author):
        cite = f"<cite>, {_t(d.source)}</cite>" if clean_text(d.source) else ""
        footer = f'\n  <footer class="block-quote__author">— {_t(d.author)}{cite}</footer>'
    return f'<blockquote class="block-quote">\n  <p>{_t(d.text)}</p>{footer}\n</blockquote>'


def render_list(b: Block, d: ListData, embeds: Embeds) -> str:
    tag = "ol" if d.type == "ordered" else "ul"
    items = "".join(f"<li>{_t(item)}</li>" for item in d.items)
    return f'<{tag} class="block-list block-list--{tag}">{items}</{tag}>'


def render_divider(b: Block, d: DividerData, embeds: Embeds) -> str:
    return '<hr class="block-divider">'


def render_spacer(b: Block, d: SpacerData, embeds: Embeds) -> str:
    height = d.height if d.height in SPACER_HEIGHTS else "md"
    return f'<div class="block-spacer block-spacer--{height}" style="height:{SPACER_HEIGHTS[height]}"></div>'


def render_callout(b: Block, d: CalloutData, embeds: Embeds) -> str:
    kind = d.type if d.type in CALLOUT_STYLES else "info"
    style = CALLOUT_STYLES[kind]
    title = f'<h4 class="block-callout__title">{style["icon"]} {_t(d.title)}</h4>' if clean_text(d.title) else ""
    return (f'<div class="block-callout block-callout--{kind} border-{style["color"]}-500 bg-{style["color"]}-50">'
            f'{title}<p>{_paragraphs(d.text)}</p></div>')


# ── Layout / highlight blocks ──────────────────────────────────────────────────

def render_columns(b: Block, d: ColumnsData, embeds: Embeds) -> str:
    count = d.columns if d.columns in (2, 3, 4) else 2
    gap = GAP_SIZES.get(d.gap, GAP_SIZES["md"])
    cells = list(d.cells[:count]) + [[]] * (count - len(d.cells[:count]))
    inner = "\n".join(
        f'  <div class="block-columns__cell">{render_blocks(load_blocks(cell), embeds)}</div>'
        for cell in cells
    )
    return (f'<div class="block-columns block-columns--{count}" '
            f'style="display:grid;grid-template-columns:repeat({count},1fr);gap:{gap}">\n{inner}\n</div>')


def render_hero(b: Block, d: HeroData, embeds: Embeds) -> str:
    bg = _url(d.background_image)
    classes = ["block-hero", f"block-hero--{_align(d.align)}"]
    style = ""
    if bg:
        style = f" style=\"background-image:url('{bg}')\""
    else:
        classes.append("block-hero--gradient")
    overlay = '<div class="block-hero__overlay"></div>' if d.background_overlay is not False else ""
    subtitle = f'\n    <p class="block-hero__subtitle">{_t(d.subtitle)}</p>' if clean_text(d.subtitle) else ""
    cta = ""
    if clean_text(d.cta_text) and _url(d.cta_link):
        cta = f'\n    <a href="{_url(d.cta_link)}" class="btn btn-light">{_t(d.cta_text)}</a>'
    return (f'<section class="{" ".join(classes)}"{style}>\n  {overlay}\n'
            f'  <div class="block-hero__content">\n    <h1 class="block-hero__title">{_t(d.title)}</h1>'
            f'{subtitle}{cta}\n  </div>\n</section>')


def render_stats(b: Block, d: StatsCounterData, embeds: Embeds) -> str:
    items = "\n".join(
        f'  <div class="block-stats__item"><div class="block-stats__value">'
        f'{_t(i.prefix)}{_number(i.value)}{_t(i.suffix)}</div>'
        f'<div class="block-stats__label">{_t(i.label)}</div></div>'
        for i in d.items
    )
    return f'<div class="block-stats">\n{items}\n</div>'


def render_timeline(b: Block, d: TimelineData, embeds: Embeds) -> str:
    items = "\n".join(
        f'  <li class="block-timeline__item"><span class="block-timeline__year">{_t(i.year)}</span>'
        f'<h4>{_t(i.title)}</h4>'
        + (f"<p>{_t(i.description)}</p>" if clean_text(i.description) else "")
        + "</li>"
        for i in d.items
    )
    return f'<ol class="block-timeline">\n{items}\n</ol>'


def render_cta(b: Block, d: CTAData, embeds: Embeds) -> str:
    desc = f'\n  <p class="block-cta__description">{_t(d.description)}</p>' if clean_text(d.description) else ""
    button = ""
    if clean_text(d.button_text) and _url(d.button_link):
        button = f'\n  <a href="{_url(d.button_link)}" class="btn btn-light">{_t(d.button_text)}</a>'
    return f'<section class="block-cta">\n  <h2 class="block-cta__title">{_t(d.title)}</h2>{desc}{button}\n</section>'


# ── Embed blocks ───────────────────────────────────────────────────────────────

def _embed(b: Block, name: str, inner: str) -> str:
    return f'<section class="embed embed--{name}" data-block-id="{escape(b.id, quote=True)}">\n{inner}\n</section>'


def _empty() -> str:
    return '  <p class="embed__empty">Belum ada data</p>'


def _cards(records: list, card: Callable[[dict], str]) -> str:
    if not records:
        return _empty()
    return "\n".join(f'  <article class="embed__card">{card(r)}</article>' for r in records)


def _img(r: dict, key: str = "image") -> str:
    src = _url(r.get(key))
    return f'<img src="{src}" alt="{_t(r.get("name") or r.get("title"))}" loading="lazy">' if src else ""


def render_staff_grid(b: Block, d: StaffGridData, embeds: Embeds) -> str:
    records = embeds.get(b.id, [])
    if not d.show_all:
        records = records[:d.limit]
    return _embed(b, "staff-grid", _cards(records, lambda r: (
        f'{_img(r, "photo")}<h3>{_t(r.get("name"))}</h3><p>{_t(r.get("position"))}</p>')))


def render_news_list(b: Block, d: NewsListData, embeds: Embeds) -> str:
    return _embed(b, "news-list", _cards(embeds.get(b.id, [])[:d.limit], lambda r: (
        f'{_img(r, "featured_img")}<h3><a href="/berita/{_url(r.get("slug"))}">{_t(r.get("title"))}</a></h3>'
        f'<p>{_t(r.get("excerpt"))}</p><time>{_t(r.get("published_at"))}</time>')))


def render_gallery_embed(b: Block, d: GalleryEmbedData, embeds: Embeds) -> str:
    records = embeds.get(b.id, [])
    if not records:
        return _embed(b, "gallery-embed", _empty())
    items = "\n".join(
        f'  <figure><img src="{_url(r.get("url"))}" alt="{_t(r.get("caption"))}" loading="lazy">'
        + (f"<figcaption>{_t(r.get('caption'))}</figcaption>" if clean_text(r.get("caption")) else "")
        + "</figure>"
        for r in records
    )
    return _embed(b, "gallery-embed", items)


def render_testimonial_slider(b: Block, d: TestimonialSliderData, embeds: Embeds) -> str:
    return _embed(b, "testimonial-slider", _cards(embeds.get(b.id, [])[:d.limit], lambda r: (
        f'<blockquote>{_t(r.get("content"))}</blockquote>'
        f'<p class="embed__rating">{"★" * max(0, min(int(r.get("rating") or 0), 5))}</p>'
        f'<footer>{_t(r.get("name"))} — {_t(r.get("role"))}</footer>')))


def _map_iframe(r: dict, height: int) -> str:
    lat, lng = r.get("latitude"), r.get("longitude")
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return ""
    src = f"https://maps.google.com/maps?q={lat},{lng}&z=15&output=embed"
    return f'<iframe src="{escape(src, quote=True)}" height="{int(height)}" style="width:100%;border:0" loading="lazy"></iframe>'


def render_contact_form(b: Block, d: ContactFormData, embeds: Embeds) -> str:
    form = (
        '  <form method="post" action="/kontak" class="embed__form">\n'
        '    <input name="name" placeholder="Nama" required>\n'
        '    <input name="email" type="email" placeholder="Email" required>\n'
        '    <input name="phone" placeholder="No. Telepon">\n'
        '    <input name="subject" placeholder="Subjek">\n'
        '    <textarea name="message" placeholder="Pesan" required></textarea>\n'
        '    <button type="submit" class="btn">Kirim Pesan</button>\n'
        '  </form>'
    )
    records = embeds.get(b.id, [])
    if d.show_map and records:
        form += "\n  " + _map_iframe(records[0], 300)
    return _embed(b, "contact-form", form)


def render_google_map(b: Block, d: GoogleMapData, embeds: Embeds) -> str:
    records = embeds.get(b.id, [])
    iframe = _map_iframe(records[0], d.height) if records else ""
    return _embed(b, "google-map", f"  {iframe}" if iframe else _empty())


def render_program_cards(b: Block, d: ProgramCardsData, embeds: Embeds) -> str:
    return _embed(b, "program-cards", _cards(embeds.get(b.id, [])[:d.limit], lambda r: (
        f'{_img(r)}<h3><a href="/program/{_url(r.get("slug"))}">{_t(r.get("name"))}</a></h3>'
        f'<p>{_t(r.get("description"))}</p>')))


def render_facility_showcase(b: Block, d: FacilityShowcaseData, embeds: Embeds) -> str:
    return _embed(b, "facility-showcase", _cards(embeds.get(b.id, [])[:d.limit], lambda r: (
        f'<span class="embed__icon">{_t(r.get("icon"))}</span><h3>{_t(r.get("name"))}</h3>'
        f'<p>{_t(r.get("description"))}</p>')))


def render_event_calendar(b: Block, d: EventCalendarData, embeds: Embeds) -> str:
    return _embed(b, "event-calendar", _cards(embeds.get(b.id, [])[:d.limit], lambda r: (
        f'<time>{_t(r.get("start_date"))}</time>'
        f'<h3><a href="/agenda/{_url(r.get("slug"))}">{_t(r.get("title"))}</a></h3>'
        f'<p>{_t(r.get("location"))}</p>')))


def render_download_list(b: Block, d: DownloadListData, embeds: Embeds) -> str:
    records = embeds.get(b.id, [])[:d.limit]
    if not records:
        return _embed(b, "download-list", _empty())
    rows = "\n".join(
        f'  <li><a href="/unduhan/{escape(str(r.get("id", "")), quote=True)}">{_t(r.get("title"))}</a>'
        f' <small>{_t(r.get("file_size"))}</small></li>'
        for r in records
    )
    return _embed(b, "download-list", f"<ul>\n{rows}\n</ul>")


def render_achievement_list(b: Block, d: AchievementListData, embeds: Embeds) -> str:
    return _embed(b, "achievement-list", _cards(embeds.get(b.id, [])[:d.limit], lambda r: (
        f'{_img(r)}<h3>{_t(r.get("title"))}</h3><p>{_t(r.get("level"))} · {_t(r.get("date"))}</p>')))


# ── Dispatch ───────────────────────────────────────────────────────────────────

_RENDERERS: Dict[Type[BlockData], Callable[[Block, Any, Embeds], str]] = {
    HeadingData: render_heading,
    ParagraphData: render_paragraph,
    ImageData: render_image,
    VideoData: render_video,
    QuoteData: render_quote,
    ListData: render_list,
    DividerData: render_divider,
    SpacerData: render_spacer,
    CalloutData: render_callout,
    ColumnsData: render_columns,
    HeroData: render_hero,
    StatsCounterData: render_stats,
    TimelineData: render_timeline,
    CTAData: render_cta,
    StaffGridData: render_staff_grid,
    NewsListData: render_news_list,
    GalleryEmbedData: render_gallery_embed,
    TestimonialSliderData: render_testimonial_slider,
    ContactFormData: render_contact_form,
    GoogleMapData: render_google_map,
    ProgramCardsData: render_program_cards,
    FacilityShowcaseData: render_facility_showcase,
    EventCalendarData: render_event_calendar,
    DownloadListData: render_download_list,
    AchievementListData: render_achievement_list,
}

_missing = set(BLOCK_DATA.values()) - set(_RENDERERS)
if _missing:
    raise RuntimeError(f"Block types without a renderer: {sorted(c.block_type for c in _missing)}")


def render_placeholder(block_type: str) -> str:
    return f'<div class="block-unknown">Blok {_t(block_type)} tidak dikenali</div>'


def render_block(block: Block, embeds: Optional[Embeds] = None) -> str:
    """HTML for one block. Unknown types render a visible placeholder."""
    data = parse_data(block)
    if data is None:
        return render_placeholder(block.type)
    return _RENDERERS[type(data)](block, data, embeds or {})


def render_blocks(blocks: List[Block], embeds: Optional[Embeds] = None) -> str:
    """Render a sequence top to bottom, one wrapper per block."""
    return "\n".join(
        f'<div class="block block--{escape(b.type, quote=True)}" id="block-{escape(b.id, quote=True)}">\n'
        f'{render_block(b, embeds)}\n</div>'
        for b in blocks
    )
