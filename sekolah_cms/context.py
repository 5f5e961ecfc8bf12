"""Request-scoped context: who is acting, in which locale, and which public paths changed."""
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import Unauthorized
from .models import Role

ROLE_LEVEL = {
    Role.SUPERADMIN.value: 3,
    Role.ADMIN.value:      2,
    Role.EDITOR.value:     1,
}


@dataclass
class Actor:
    id: str
    name: str
    email: str
    role: str

    @property
    def level(self) -> int:
        return ROLE_LEVEL.get(self.role, 0)

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


@dataclass
class RequestContext:
    actor: Optional[Actor] = None
    locale: str = "id"
    invalidated_paths: List[str] = field(default_factory=list)

    def invalidate(self, *paths: str):
        for p in paths:
            if p and p not in self.invalidated_paths:
                self.invalidated_paths.append(p)


def has_role(ctx: Optional[RequestContext], minimum: Role) -> bool:
    return bool(ctx and ctx.actor and ctx.actor.level >= ROLE_LEVEL[minimum.value])


def require_role(ctx: Optional[RequestContext], minimum: Role = Role.EDITOR) -> Actor:
    """Actor of `ctx` when its role is at least `minimum`; raises Unauthorized otherwise."""
    if not has_role(ctx, minimum):
        raise Unauthorized()
    return ctx.actor
