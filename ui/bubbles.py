"""ASCII chat bubbles.

Other people's messages hang off the left margin with a tail at the bottom
left. The viewer's own messages are indented and get the tail on the right::

    [ 12 ]
     _____________________________________
    | Alice | 2024-03-01 10:15:00         |
    |~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~|
    | hi there                            |
    |                                     |
    | ____________________________________|
    |/
    '
"""
from typing import List

MIN_WIDTH = 35
INDENT = "\t"


def bubble_width(body: str, sender: str, timestamp: str) -> int:
    """Inner width of a bubble, grown to fit the body and the header"""
    return max(MIN_WIDTH, len(body), len(sender) + 3 + len(timestamp))


def render_bubble(
    msg_id: str, body: str, timestamp: str, sender: str, viewer: str
) -> List[str]:
    width = bubble_width(body, sender, timestamp)
    own = sender == viewer
    header = f"{sender} | {timestamp}"

    lines = [
        f"[ {msg_id} ]",
        " " + "_" * (width + 2),
        f"| {header.ljust(width)} |",
        "|" + "~" * (width + 2) + "|",
        f"| {body.ljust(width)} |",
        f"| {' ' * width} |",
    ]

    if own:
        lines += [
            "|" + "_" * (width + 1) + " |",
            " " * (width + 2) + "\\|",
            " " * (width + 3) + "'",
        ]
        return [INDENT + line for line in lines]

    lines += [
        "| " + "_" * (width + 1) + "|",
        "|/",
        "'",
    ]
    return lines


def render_messages(messages: List[dict], viewer: str) -> List[str]:
    """Bubbles for messages given newest first, laid out oldest at the top"""
    lines: List[str] = []
    for message in reversed(messages):
        lines.extend(
            render_bubble(
                message["msg_id"],
                message["msg_text"],
                message["msg_timestamp"],
                message["sender_login"],
                viewer,
            )
        )
    return lines
