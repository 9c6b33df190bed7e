"""
Publish options and their translation into ntfy request headers.

Only options that carry a value end up as headers. The three boolean flags
are sent only when they differ from the server default.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

MIN_PRIORITY = 1
MAX_PRIORITY = 5


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class PublishOptions:
    """
    Optional settings for a published message.

    Attributes:
        markdown: Render the message body as Markdown
        cache: Set to False to keep the server from caching the message
        firebase: Set to False to disable Firebase (FCM) forwarding
        priority: 1 to 5; anything else is silently left out
        tags: Comma separated tags
        title: Notification title
        delay: Scheduled delivery. A Unix timestamp ("1639194738"), a
            duration ("30m", "3h", "2 days") or a natural language time
            ("10am", "tomorrow, 3pm"). Passed to the server unchecked.
        attach: Attachment URL
        icon: Icon URL
        filename: Override the attachment filename
        click: URL to open when the notification is clicked
        email: E-mail address for e-mail notifications
        actions: Raw action directives, built with the add_*_action helpers
    """
    markdown: bool = False
    cache: bool = True
    firebase: bool = True
    priority: Optional[int] = None
    tags: Optional[str] = None
    title: Optional[str] = None
    delay: Optional[str] = None
    attach: Optional[str] = None
    icon: Optional[str] = None
    filename: Optional[str] = None
    click: Optional[str] = None
    email: Optional[str] = None
    actions: List[str] = field(default_factory=list)

    def add_view_action(self, label: str, url: str, clear: bool = False) -> None:
        """Add a button that opens a URL."""
        self.actions.append(f"view, {label}, url={url}, clear={_flag(clear)}")

    def add_http_action(
        self,
        label: str,
        url: str,
        method: Optional[str] = None,
        headers: Optional[str] = None,
        body: Optional[str] = None,
        clear: bool = False,
    ) -> None:
        """
        Add a button that sends an HTTP request.

        The directive is written exactly as older clients emitted it:
        method, headers and body are all appended under the intent= key.
        """
        action = f"broadcast, {label}, url={url}, clear={_flag(clear)}"
        if method is not None:
            action += f", intent={method}"
        if headers is not None:
            action += f", intent={headers}"
        if body is not None:
            action += f", intent={body}"
        self.actions.append(action)

    def add_broadcast_action(
        self,
        label: str,
        intent: Optional[str] = None,
        extras: Optional[str] = None,
        clear: bool = False,
    ) -> None:
        """Add a button that sends an Android broadcast intent."""
        action = f"broadcast, {label}, clear={_flag(clear)}"
        if intent is not None:
            action += f", intent={intent}"
        if extras is not None:
            action += f", intent={extras}"
        self.actions.append(action)

    def to_headers(self) -> Dict[str, str]:
        """Return the ntfy request headers for these options."""
        return build_metadata(self)


def build_metadata(options: Optional[PublishOptions]) -> Dict[str, str]:
    """
    Translate publish options into request headers.

    Args:
        options: The options to translate; None yields no headers

    Returns:
        Header name to value mapping, containing only options that are set
    """
    if options is None:
        return {}

    output: Dict[str, str] = {}
    verbatim = {
        "Tags": options.tags,
        "Title": options.title,
        "Delay": options.delay,
        "Attach": options.attach,
        "Icon": options.icon,
        "Filename": options.filename,
        "Email": options.email,
        "Click": options.click,
    }
    for name, value in verbatim.items():
        if value is not None:
            output[name] = value

    # Out of range priorities are dropped, not rejected
    if options.priority is not None and MIN_PRIORITY <= options.priority <= MAX_PRIORITY:
        output["Priority"] = str(options.priority)
    if options.markdown:
        output["Markdown"] = "yes"
    if not options.cache:
        output["Cache"] = "no"
    if not options.firebase:
        output["Firebase"] = "no"
    if options.actions:
        output["Actions"] = ";".join(options.actions)
    return output
