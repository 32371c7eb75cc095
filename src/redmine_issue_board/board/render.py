"""HTML rendering for the issue board.

The page template is loaded and compiled once, when the renderer is built, so a
broken template stops the process at startup instead of failing every request.
All template output is autoescaped; issue subjects and names come straight from
Redmine and must never reach the page as markup.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from jinja2 import TemplateError as JinjaTemplateError

from redmine_issue_board.board.errors import TemplateError
from redmine_issue_board.board.issue_service import IssuesByAssignee

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
PAGE_TEMPLATE = "issues.html"


class IssueBoardRenderer:
    """Renders the per-assignee issue map as a single HTML page."""

    def __init__(self, template_dir: Path | str | None = None) -> None:
        """Load and compile the page template.

        Args:
            template_dir: Directory containing ``issues.html``
                (default: the templates bundled with this package).

        Raises:
            TemplateError: If the template is missing or does not parse.
        """
        self.template_dir = Path(template_dir) if template_dir is not None else DEFAULT_TEMPLATE_DIR

        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

        try:
            self._template = self.env.get_template(PAGE_TEMPLATE)
        except TemplateNotFound as e:
            raise TemplateError(f"Template not found: {self.template_dir / PAGE_TEMPLATE}") from e
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to parse template {PAGE_TEMPLATE}: {e}") from e

    def render(self, issues_by_assignee: IssuesByAssignee) -> str:
        """Render the page.

        Rows follow the map's order: assignees in insertion order, then each
        assignee's issues in fetch order.
        """
        try:
            return self._template.render(issues_by_assignee=issues_by_assignee)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render {PAGE_TEMPLATE}: {e}") from e
