import os

import pytest

from cluttarex import config as config_module


ARTICLE_PROSE = (
    "The river had been rising for three days before anyone in the valley "
    "thought to move the grain out of the low barns. "
) * 5


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user/local config files and CLUTTAREX_* variables out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("CLUTTAREX_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(config_module, "_config", None)
    yield


@pytest.fixture
def prose():
    """About 600 characters of article text."""
    return ARTICLE_PROSE.strip()


@pytest.fixture
def article_page(prose):
    """A realistic page with an article surrounded by clutter."""
    return f"""<!DOCTYPE html>
<html lang="en" dir="ltr">
<head>
  <title>Flood Season in the Valley</title>
  <meta charset="utf-8">
  <link rel="stylesheet" href="/site.css">
  <script>trackPageView();</script>
</head>
<body class="single-post">
  <header><a href="/">Home</a></header>
  <nav><a href="/news">News</a><a href="/sport">Sport</a></nav>
  <main>
    <article>
      <h1>Flood Season in the Valley</h1>
      <span class="byline">3 hours ago</span>
      <p style="color: red" class="lead">{prose}</p>
      <img src="/images/river-crossing-2024.jpg" width="800" height="600" loading="lazy">
      <p>Read the <a href="/reports/flood.pdf">full report</a> or
         <a href="#comments">jump to comments</a> or
         <a href="mailto:desk@example.com">write to us</a>.</p>
      <div class="share-buttons"><a href="https://twitter.com/share">Tweet</a></div>
      <div><p></p></div>
    </article>
  </main>
  <aside>Popular this week</aside>
  <footer>Copyright</footer>
</body>
</html>"""
