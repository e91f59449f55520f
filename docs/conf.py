from __future__ import annotations

project = "podcast-feed"
author = "podcast-feed"
release = "0.1.0"

extensions = ["myst_parser"]
source_suffix = {".md": "markdown"}
root_doc = "index"

exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

html_theme = "furo"

myst_heading_anchors = 3
