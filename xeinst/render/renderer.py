"""
Renderer — display model in, HTML out.

render() is a pure function of the Page it is given: no session lookups,
no provider calls, no clock.  Templates live in the package and are picked
by the content's ``kind`` (``landing`` → ``landing.html``).
"""

from __future__ import annotations

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from xeinst.models.views import Page, money


def _number(value: int | float) -> str:
    return f"{value:,}"


def build_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("xeinst", "render/templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["money"] = money
    env.filters["number"] = _number
    return env


class Renderer:

    def __init__(self, env: Environment | None = None) -> None:
        self._env = env or build_environment()

    def render(self, page: Page) -> str:
        template = self._env.get_template(f"{page.content.kind}.html")
        return template.render(page=page, nav=page.nav, view=page.content)
