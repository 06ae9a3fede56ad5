"""
Email templates for task notifications.

Each registered template builds its HTML and plain text bodies independently
from the same data bag. Every value interpolated into HTML is escaped, and
missing optional values drop their fragment instead of rendering "None".
"""

from enum import Enum
from html import escape
from typing import Any, Callable, Dict, List, Mapping, Optional

from models.notification import RenderedContent
from notifications.errors import UnknownTemplate

APP_NAME = "Tidy Prioritize"
DEFAULT_FOOTER = f"{APP_NAME} - Keep your tasks organized"


class TemplateId(str, Enum):
    """Closed set of registered template identifiers."""

    TASK_REMINDER = "task-reminder"
    TASK_ASSIGNED = "task-assigned"
    TASK_COMPLETED = "task-completed"
    WELCOME = "welcome"
    PASSWORD_RESET = "password-reset"


def _value(data: Mapping[str, Any], key: str) -> str:
    """Return a field as a stripped string, or '' when absent."""
    raw = data.get(key)
    if raw is None:
        return ""
    return str(raw).strip()


def _h(value: str) -> str:
    return escape(value, quote=True)


def _build_html(title: str, accent: str, content: str, footer: str) -> str:
    """Wrap template content in the shared email layout."""
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{_h(title)}</title>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background-color: {accent}; color: white; padding: 20px; text-align: center; }}
    .content {{ background-color: #f9fafb; padding: 20px; margin-top: 20px; border-radius: 8px; }}
    .task-name {{ font-size: 20px; font-weight: bold; margin-bottom: 10px; }}
    .due-date {{ color: #dc2626; font-weight: bold; }}
    .button {{ display: inline-block; background-color: {accent}; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; margin-top: 20px; }}
    .warning {{ background-color: #fef2f2; border-left: 4px solid #dc2626; padding: 12px; margin: 20px 0; }}
    .footer {{ margin-top: 30px; text-align: center; color: #6b7280; font-size: 12px; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>{_h(title)}</h1>
    </div>
    <div class="content">
{content}
    </div>
    <div class="footer">
      <p>{_h(footer)}</p>
    </div>
  </div>
</body>
</html>
"""


def _build_text(title: str, blocks: List[str], footer: str) -> str:
    """Join non-empty text blocks under a title, separated by blank lines."""
    parts = [title] + [block for block in blocks if block]
    return "\n\n".join(parts) + f"\n\n---\n{footer}\n"


def _task_details_html(description: str, due_date: str, url: str) -> List[str]:
    lines = []
    if description:
        lines.append(f"      <p>{_h(description)}</p>")
    if due_date:
        lines.append(
            f'      <p>Due Date: <span class="due-date">{_h(due_date)}</span></p>'
        )
    if url:
        lines.append(f'      <a href="{_h(url)}" class="button">View Task</a>')
    return lines


def _task_reminder(data: Mapping[str, Any]) -> RenderedContent:
    task_name = _value(data, "taskName")
    description = _value(data, "description")
    due_date = _value(data, "dueDate")
    url = _value(data, "url")
    title = "Task Reminder"
    footer = f"This is an automated reminder from {APP_NAME}"

    content = []
    if task_name:
        content.append(f'      <div class="task-name">{_h(task_name)}</div>')
    content.extend(_task_details_html(description, due_date, url))

    text = _build_text(
        title,
        [
            task_name,
            description,
            f"Due Date: {due_date}" if due_date else "",
            f"View Task: {url}" if url else "",
        ],
        footer,
    )
    return RenderedContent(
        html=_build_html(title, "#4F46E5", "\n".join(content), footer), text=text
    )


def _task_assigned(data: Mapping[str, Any]) -> RenderedContent:
    task_name = _value(data, "taskName")
    assigned_by = _value(data, "assignedBy")
    description = _value(data, "description")
    due_date = _value(data, "dueDate")
    url = _value(data, "url")
    title = "New Task Assigned"

    if assigned_by:
        intro_html = f"{_h(assigned_by)} has assigned you a new task:"
        intro_text = f"{assigned_by} has assigned you a new task:"
    else:
        intro_html = intro_text = "You have been assigned a new task:"

    content = [f"      <p>{intro_html}</p>"]
    if task_name:
        content.append(f'      <div class="task-name">{_h(task_name)}</div>')
    content.extend(_task_details_html(description, due_date, url))

    text = _build_text(
        title,
        [
            intro_text,
            task_name,
            description,
            f"Due Date: {due_date}" if due_date else "",
            f"View Task: {url}" if url else "",
        ],
        DEFAULT_FOOTER,
    )
    return RenderedContent(
        html=_build_html(title, "#10b981", "\n".join(content), DEFAULT_FOOTER),
        text=text,
    )


def _task_completed(data: Mapping[str, Any]) -> RenderedContent:
    task_name = _value(data, "taskName")
    completed_by = _value(data, "completedBy")
    completed_at = _value(data, "completedAt")
    title = "Task Completed"

    content = []
    if task_name:
        content.append(f'      <div class="task-name">{_h(task_name)}</div>')
    if completed_by:
        content.append(f"      <p>Completed by: {_h(completed_by)}</p>")
    if completed_at:
        content.append(f"      <p>Completed at: {_h(completed_at)}</p>")
    if not content:
        content.append("      <p>A task has been marked as completed.</p>")

    blocks = [
        task_name,
        "\n".join(
            line
            for line in (
                f"Completed by: {completed_by}" if completed_by else "",
                f"Completed at: {completed_at}" if completed_at else "",
            )
            if line
        ),
    ]
    if not any(blocks):
        blocks = ["A task has been marked as completed."]

    return RenderedContent(
        html=_build_html(f"✓ {title}", "#059669", "\n".join(content), DEFAULT_FOOTER),
        text=_build_text(f"✓ {title}", blocks, DEFAULT_FOOTER),
    )


def _welcome(data: Mapping[str, Any]) -> RenderedContent:
    user_name = _value(data, "userName") or "there"
    login_url = _value(data, "loginUrl")
    title = f"Welcome to {APP_NAME}!"
    welcome_line = (
        f"Welcome to {APP_NAME}! We're excited to help you organize and "
        "prioritize your tasks effectively."
    )
    start_line = (
        "Get started by creating your first task and let our AI help you "
        "prioritize what matters most."
    )

    content = [
        f"      <p>Hi {_h(user_name)},</p>",
        f"      <p>{_h(welcome_line)}</p>",
        f"      <p>{_h(start_line)}</p>",
    ]
    if login_url:
        content.append(
            f'      <a href="{_h(login_url)}" class="button">Get Started</a>'
        )

    text = _build_text(
        title,
        [
            f"Hi {user_name},",
            welcome_line,
            start_line,
            f"Get Started: {login_url}" if login_url else "",
        ],
        DEFAULT_FOOTER,
    )
    return RenderedContent(
        html=_build_html(title, "#4F46E5", "\n".join(content), DEFAULT_FOOTER),
        text=text,
    )


def _password_reset(data: Mapping[str, Any]) -> RenderedContent:
    reset_url = _value(data, "resetUrl")
    expires_in = _value(data, "expiresIn") or "1 hour"
    title = "Password Reset Request"
    notice = (
        f"This link will expire in {expires_in}. If you didn't request this "
        "reset, please ignore this email."
    )

    content = [
        "      <p>You requested to reset your password. "
        "Click the button below to proceed:</p>"
    ]
    if reset_url:
        content.append(
            f'      <a href="{_h(reset_url)}" class="button">Reset Password</a>'
        )
    content.append(
        f'      <div class="warning"><strong>Security Notice:</strong> {_h(notice)}</div>'
    )

    text = _build_text(
        title,
        [
            "You requested to reset your password. Click the link below to proceed:",
            reset_url or "No reset URL provided",
            f"SECURITY NOTICE: {notice}",
        ],
        DEFAULT_FOOTER,
    )
    return RenderedContent(
        html=_build_html(title, "#dc2626", "\n".join(content), DEFAULT_FOOTER),
        text=text,
    )


TEMPLATES: Dict[TemplateId, Callable[[Mapping[str, Any]], RenderedContent]] = {
    TemplateId.TASK_REMINDER: _task_reminder,
    TemplateId.TASK_ASSIGNED: _task_assigned,
    TemplateId.TASK_COMPLETED: _task_completed,
    TemplateId.WELCOME: _welcome,
    TemplateId.PASSWORD_RESET: _password_reset,
}


def resolve_template_id(template_id: str) -> TemplateId:
    """
    Map a template identifier string to its registry key.

    Raises:
        UnknownTemplate: If the identifier is not registered
    """
    try:
        return TemplateId(template_id)
    except ValueError:
        raise UnknownTemplate(template_id) from None


def render_template(
    template_id: str, data: Optional[Mapping[str, Any]] = None
) -> RenderedContent:
    """
    Render a registered template.

    Args:
        template_id: One of the TemplateId values
        data: Template fields (camelCase keys, e.g. taskName, dueDate)

    Returns:
        RenderedContent with both HTML and plain text bodies

    Raises:
        UnknownTemplate: If template_id is not registered
    """
    builder = TEMPLATES[resolve_template_id(template_id)]
    return builder(data or {})
