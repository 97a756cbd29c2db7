"""Entitlements granted to the release build."""

from __future__ import annotations

from pathlib import Path

from charship.platform.files import atomic_write_text

RELEASE_ENTITLEMENTS = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
  <key>com.apple.security.app-sandbox</key>
  <true/>
  <key>com.apple.security.files.user-selected.read-only</key>
  <true/>
</dict>
</plist>
"""


def write_entitlements(path: Path) -> Path:
    atomic_write_text(path, RELEASE_ENTITLEMENTS)
    return path
