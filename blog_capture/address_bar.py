import base64
import html
from urllib.parse import urlparse

"""
Synthetic Chrome-style browser header drawn above each capture.

The header is two fixed rows: a 40px tab strip and a 44px navigation row with
the address field, so every composite is exactly ADDRESS_BAR_HEIGHT taller than
the captured content.
"""

TAB_STRIP_HEIGHT = 40
NAV_ROW_HEIGHT = 44
ADDRESS_BAR_HEIGHT = TAB_STRIP_HEIGHT + NAV_ROW_HEIGHT

FONT_STACK = "'Segoe UI',Arial,sans-serif"


def display_url(url: str) -> str:
    """
    host + path + ?query for an absolute URL. Anything unparseable is returned unchanged.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return url
    if not parsed.scheme or not parsed.netloc:
        return url
    shown = parsed.netloc + parsed.path
    if parsed.query:
        shown += "?" + parsed.query
    return shown


def render_address_bar(url: str, tab_label: str) -> str:
    """Return the header markup for 'url'. Pure; never raises."""
    shown = html.escape(display_url(url))
    label = html.escape(tab_label)
    return f"""
    <div style="width:100%;height:{TAB_STRIP_HEIGHT}px;background:#dee1e6;display:flex;align-items:flex-end;padding:0 8px;font-family:{FONT_STACK};box-sizing:border-box;">
        <div style="display:flex;align-items:center;height:32px;background:white;border-radius:8px 8px 0 0;padding:0 12px;min-width:180px;max-width:220px;">
            <span style="font-size:12px;color:#202124;white-space:nowrap;overflow:hidden;text-overflow:ellipsis;flex:1;">{label}</span>
            <span style="margin-left:8px;color:#5f6368;font-size:12px;">&#215;</span>
        </div>
    </div>
    <div style="width:100%;height:{NAV_ROW_HEIGHT}px;background:white;display:flex;align-items:center;padding:0 12px;font-family:{FONT_STACK};box-sizing:border-box;border-bottom:1px solid #dadce0;">
        <div style="display:flex;gap:6px;margin-right:10px;">
            <span style="color:#5f6368;font-size:16px;">&#8592;</span>
            <span style="color:#c4c4c4;font-size:16px;">&#8594;</span>
            <span style="color:#5f6368;font-size:16px;">&#8635;</span>
        </div>
        <div style="flex:1;height:30px;background:#f1f3f4;border-radius:15px;display:flex;align-items:center;padding:0 14px;max-width:700px;">
            <span style="font-size:13px;color:#202124;white-space:nowrap;overflow:hidden;text-overflow:ellipsis;">{shown}</span>
        </div>
        <div style="display:flex;gap:12px;margin-left:10px;color:#5f6368;">
            <span style="font-size:16px;">&#9734;</span>
            <span style="font-size:16px;">&#8942;</span>
        </div>
    </div>
    """


def render_composite(
    url: str,
    image_png: bytes,
    width: int,
    content_height: int,
    tab_label: str,
) -> str:
    """
    Full HTML document: the address bar stacked above the captured PNG,
    sized width x (ADDRESS_BAR_HEIGHT + content_height).
    """
    total_height = ADDRESS_BAR_HEIGHT + content_height
    encoded = base64.b64encode(image_png).decode("ascii")
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <style>
        * {{ margin: 0; padding: 0; }}
        body {{ width: {width}px; height: {total_height}px; }}
    </style>
</head>
<body>
    {render_address_bar(url, tab_label)}
    <img src="data:image/png;base64,{encoded}" style="width: {width}px; display: block;">
</body>
</html>
"""
