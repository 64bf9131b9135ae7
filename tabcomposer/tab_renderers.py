"""Renderer implementations that hand finished alphaTex to the alphaTab engine."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path

ALPHATAB_CDN = "https://cdn.jsdelivr.net/npm/@coderline/alphatab@latest/dist"


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class TabRenderer(ABC):
    """Abstract tablature renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, *, title: str, notation: str) -> str:
        """Render alphaTex notation into a file content string."""


class AlphaTexRenderer(TabRenderer):
    """Pass the notation through unchanged, for saving the raw alphaTex source."""

    @property
    def default_extension(self) -> str:
        return ".atex"

    def render(self, *, title: str, notation: str) -> str:
        return notation


class AlphaTabHtmlRenderer(TabRenderer):
    """
    Render alphaTex into a self-contained HTML page driven by alphaTab.

    The page loads alphaTab and its fonts from a CDN, shows the tab stave
    only, and offers play and print buttons. Printing from the browser is
    how a PDF is exported.
    """

    @property
    def default_extension(self) -> str:
        return ".html"

    def render(self, *, title: str, notation: str) -> str:
        title_safe = _escape_html(title)
        heading = f"  <h1>{title_safe}</h1>\n" if title else ""
        notation_json = json.dumps(notation).replace("</", "<\\/")

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    body {{
      font-family: Georgia, serif;
      background: #f0f0f0;
      margin: 0;
      padding: 2rem;
    }}
    h1 {{
      text-align: center;
      font-size: 1.6rem;
      color: #222;
    }}
    .controls {{
      text-align: center;
      margin-bottom: 1rem;
    }}
    .alphaTab {{
      background: #fff;
      box-shadow: 0 2px 8px rgba(0, 0, 0, 0.15);
      margin: 0 auto;
      max-width: 1000px;
      padding: 1rem;
    }}
    @media print {{
      body {{ background: #fff; padding: 0; }}
      .controls {{ display: none; }}
      .alphaTab {{ box-shadow: none; max-width: 100%; }}
    }}
  </style>
</head>
<body>
{heading}  <div class="controls">
    <button id="tabcomposer-play" type="button">Play / Pause</button>
    <button id="tabcomposer-print" type="button">Print</button>
  </div>
  <div id="tabcomposer-score" class="alphaTab"></div>
  <script src="{ALPHATAB_CDN}/alphaTab.js"></script>
  <script>
    const notation = {notation_json};
    const host = document.getElementById("tabcomposer-score");
    const api = new alphaTab.AlphaTabApi(host, {{
      core: {{ fontDirectory: "{ALPHATAB_CDN}/font/", useWorkers: false }},
      display: {{ staveProfile: alphaTab.StaveProfile.Tab }},
      player: {{
        enablePlayer: true,
        soundFont: "{ALPHATAB_CDN}/soundfont/sonivox.sf2"
      }}
    }});
    api.error.on((e) => console.error("alphaTab error:", e));
    try {{
      api.tex(notation);
    }} catch (e) {{
      console.error("alphaTab could not parse the notation:", e);
    }}
    document.getElementById("tabcomposer-play").onclick = () => api.playPause();
    document.getElementById("tabcomposer-print").onclick = () => api.print();
  </script>
</body>
</html>"""


class FileRenderTarget:
    """
    Render target that rewrites an output file on every document change.

    Registered with a ``TabComposer`` it acts as a live preview: each call
    renders the notation and overwrites ``path``.
    """

    def __init__(self, renderer: TabRenderer, path: str | Path, title: str = "") -> None:
        self.renderer = renderer
        self.path = Path(path)
        self.title = title

    def __call__(self, notation: str) -> None:
        """
        Raises:
            OSError: If the output file cannot be written.
        """
        content = self.renderer.render(title=self.title, notation=notation)
        with open(self.path, "w", encoding="utf-8") as fh:
            fh.write(content)
