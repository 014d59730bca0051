"""
RouteTable - method/path lookup for registered handlers.

Two tiers:
1. Static routes: O(1) dict lookup per method
2. Parameterized routes (``/items/:id`` or ``/items/{id}``): compiled
   regexes tried in registration order
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
import re


Handler = Callable[[Any, Any], Any]

_PARAM_RE = re.compile(r":(\w+)|\{(\w+)\}")


@dataclass
class RouteMatch:
    """Result of a successful route match."""
    handler: Handler
    pattern: str
    params: Dict[str, str]


def _normalize(path: str) -> str:
    return path.rstrip("/") or "/"


def compile_pattern(pattern: str) -> Tuple[Optional[re.Pattern], List[str]]:
    """Compile a route pattern. Returns (None, []) for a static path."""
    names: List[str] = []
    regex = ""
    last = 0
    for m in _PARAM_RE.finditer(pattern):
        regex += re.escape(pattern[last:m.start()])
        name = m.group(1) or m.group(2)
        if name in names:
            raise ValueError(f"Duplicate parameter '{name}' in route pattern '{pattern}'")
        names.append(name)
        regex += f"(?P<{name}>[^/]+)"
        last = m.end()

    if not names:
        return None, []

    regex += re.escape(pattern[last:])
    return re.compile(f"^{regex.rstrip('/')}$"), names


class RouteTable:
    """Per-method routing table. Written at registration time only."""

    def __init__(self):
        self._static: Dict[str, Dict[str, Tuple[Handler, str]]] = {}
        self._dynamic: Dict[str, List[Tuple[re.Pattern, Handler, str]]] = {}

    def add(self, method: str, pattern: str, handler: Handler) -> None:
        method = method.upper()
        compiled, _ = compile_pattern(pattern)
        if compiled is None:
            self._static.setdefault(method, {})[_normalize(pattern)] = (handler, pattern)
        else:
            self._dynamic.setdefault(method, []).append((compiled, handler, pattern))

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        method = method.upper()
        norm_path = _normalize(path)

        hit = self._static.get(method, {}).get(norm_path)
        if hit is not None:
            return RouteMatch(handler=hit[0], pattern=hit[1], params={})

        for compiled, handler, pattern in self._dynamic.get(method, ()):
            m = compiled.match(norm_path)
            if m:
                return RouteMatch(handler=handler, pattern=pattern, params=m.groupdict())

        return None

    def allowed_methods(self, path: str) -> List[str]:
        """Methods that have a route matching ``path``."""
        methods = set(self._static) | set(self._dynamic)
        return sorted(m for m in methods if self.match(m, path) is not None)

    def __len__(self) -> int:
        return (
            sum(len(routes) for routes in self._static.values())
            + sum(len(routes) for routes in self._dynamic.values())
        )
