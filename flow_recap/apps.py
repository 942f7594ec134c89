from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

UNKNOWN_APP = "Unknown"

APP_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "dev.warp.Warp-Stable": "Warp",
        "com.apple.Safari": "Safari",
        "com.google.Chrome": "Chrome",
        "com.tinyspeck.slackmacgap": "Slack",
        "com.microsoft.VSCode": "VS Code",
        "com.todesktop.230313mzl4w4u92": "Cursor",
        "com.linear": "Linear",
        "com.apple.MobileSMS": "Messages",
        "com.apple.mail": "Mail",
        "com.apple.Notes": "Notes",
        "com.openai.chat": "ChatGPT",
        "com.superhuman.electron": "Superhuman",
        "com.figma.Desktop": "Figma",
        "com.apple.finder": "Finder",
        "com.apple.Terminal": "Terminal",
        "md.obsidian": "Obsidian",
        "notion.id": "Notion",
        "com.codeium.windsurf": "Windsurf",
        "company.thebrowser.Browser": "Arc",
        "net.shinyfrog.bear": "Bear",
        "com.hnc.Discord": "Discord",
        "com.spotify.client": "Spotify",
        "us.zoom.xos": "Zoom",
    }
)

_APP_STORE = "https://is1-ssl.mzstatic.com/image/thumb/"

APP_ICONS: Mapping[str, str] = MappingProxyType(
    {
        "dev.warp.Warp-Stable": _APP_STORE + "Purple211/v4/4e/30/a3/4e30a3c6-4e6a-8b3e-2c43-1e5e1392da38/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "com.apple.Safari": _APP_STORE + "Purple221/v4/e4/90/f7/e490f720-05f3-da66-87b5-2c24d2039027/AppIcon-0-0-85-220-0-0-4-0-2x-P3.png/128x128bb.png",
        "com.google.Chrome": _APP_STORE + "Purple211/v4/43/81/fa/4381faed-2d0d-c3a8-9692-faab4f3c7197/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "com.tinyspeck.slackmacgap": _APP_STORE + "Purple211/v4/4c/d2/e3/4cd2e362-0499-89c7-a1f5-1708b8b0b9f3/AppIcon-85-220-0-4-2x-sRGB.png/128x128bb.png",
        "com.microsoft.VSCode": "https://code.visualstudio.com/assets/images/code-stable.png",
        "com.todesktop.230313mzl4w4u92": "https://cursor.sh/apple-touch-icon.png",
        "com.apple.MobileSMS": _APP_STORE + "Purple211/v4/09/63/1e/09631eff-b2e2-0279-c9ba-221c84bc8a74/AppIcon-0-1x_U007emarketing-0-0-0-10-0-0-85-220-0.png/128x128bb.png",
        "com.apple.mail": _APP_STORE + "Purple211/v4/b7/1c/6b/b71c6b5b-db47-6dab-2f24-7b79e2413b64/AppIcon-0-0-85-220-0-0-4-0-2x.png/128x128bb.png",
        "com.openai.chat": _APP_STORE + "Purple221/v4/a8/2e/4d/a82e4d68-dc3a-a762-6e07-e6e1be5e01a8/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "com.superhuman.electron": "https://superhuman.com/favicon-196x196.png",
        "com.figma.Desktop": _APP_STORE + "Purple211/v4/41/31/8e/41318ea1-7be2-2aaa-07ae-3c3a1e0a04c3/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "md.obsidian": _APP_STORE + "Purple211/v4/6e/1f/34/6e1f34cb-a1f9-4f67-e8d3-1a8d7bb5f1d2/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "notion.id": _APP_STORE + "Purple211/v4/f4/67/94/f467940c-9b4b-7a71-f1e6-f4a43aef3de5/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "company.thebrowser.Browser": _APP_STORE + "Purple211/v4/4f/0f/bd/4f0fbd2a-fd34-56d2-35c2-9b1f51db38fc/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "net.shinyfrog.bear": _APP_STORE + "Purple211/v4/88/de/a5/88dea5c5-6ca2-72c4-fb51-c7563eb06b60/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "com.hnc.Discord": _APP_STORE + "Purple211/v4/77/3c/3f/773c3fe3-7f3c-ed1f-8c4c-8dab2a55f040/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "com.spotify.client": _APP_STORE + "Purple211/v4/ae/5e/44/ae5e4464-5965-67e6-66ba-6e06b19b19e9/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "us.zoom.xos": _APP_STORE + "Purple211/v4/47/a6/72/47a672c6-4261-d5cf-3acb-dd62ce0d9788/AppIcon-85-220-0-4-2x.png/128x128bb.png",
        "com.codeium.windsurf": "https://codeium.com/favicon.png",
        "com.linear": "https://linear.app/favicon-128.png",
    }
)


def resolve_name(app_id: str | None) -> str:
    if not app_id:
        return UNKNOWN_APP
    known = APP_NAMES.get(app_id)
    if known:
        return known
    # Best effort: "com.example.my-app" -> "my app"
    return app_id.split(".")[-1].replace("-", " ")


def resolve_icon(app_id: str | None) -> str | None:
    if not app_id:
        return None
    return APP_ICONS.get(app_id)


def fallback_initial(name: str) -> str:
    stripped = (name or "").strip()
    return stripped[0] if stripped else "?"
