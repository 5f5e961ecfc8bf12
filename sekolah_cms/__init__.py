"""Sekolah CMS — school website back office and public site."""
__version__ = "1.0.0"
