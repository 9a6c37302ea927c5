# Third-party imports
import bleach
import markdown2


def render_description(text):
    """
    Render an event description written in a limited Markdown subset to HTML.

    Args:
        text (str): Raw description as entered by an admin or submitter.

    Returns:
        str: Sanitized HTML safe for rendering, or an empty string.
    """
    if not text:
        return ''
    html_content = markdown2.markdown(text, extras=["fenced-code-blocks", "code-friendly"])
    return sanitize_html_content(html_content)


def sanitize_html_content(html_content):
    """
    Sanitize HTML content to prevent XSS while allowing simple formatting.

    Args:
        html_content (str): Raw HTML content to sanitize.

    Returns:
        str: Sanitized HTML content safe for rendering.
    """
    allowed_tags = [
        'p', 'br', 'strong', 'em', 'b', 'i', 'u', 'ul', 'ol', 'li', 'a',
        'blockquote', 'code', 'pre', 'hr'
    ]
    allowed_attributes = {
        'a': ['href', 'title'],
    }
    return bleach.clean(html_content, tags=allowed_tags, attributes=allowed_attributes, strip=True)
