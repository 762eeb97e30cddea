"""Shared Istanbul report fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from covview.parsing.dom import parse_html

if TYPE_CHECKING:
    from pathlib import Path

    from bs4 import BeautifulSoup

# ── Sample pages ─────────────────────────────────────────────────

_STAT_BLOCK = """
        <div class='fl pad1y space-right2'>
            <span class="strong">{pct} </span>
            <span class="quiet">{label}</span>
            <span class='fraction'>{fraction}</span>
        </div>"""

_TABLE_HEAD = """<thead>
<tr>
   <th data-col="file" data-fmt="html" data-html="true" class="file">File</th>
   <th data-col="pic" data-type="number" data-fmt="html" data-html="true" class="pic"></th>
   <th data-col="statements" data-type="number" data-fmt="pct" class="pct">Statements</th>
   <th data-col="statements_raw" data-type="number" data-fmt="html" class="abs"></th>
   <th data-col="branches" data-type="number" data-fmt="pct" class="pct">Branches</th>
   <th data-col="branches_raw" data-type="number" data-fmt="html" class="abs"></th>
   <th data-col="functions" data-type="number" data-fmt="pct" class="pct">Functions</th>
   <th data-col="functions_raw" data-type="number" data-fmt="html" class="abs"></th>
   <th data-col="lines" data-type="number" data-fmt="pct" class="pct">Lines</th>
   <th data-col="lines_raw" data-type="number" data-fmt="html" class="abs"></th>
</tr>
</thead>"""

_ROW = """<tr>
	<td class="file high" data-value="{name}"><a href="{href}">{name}</a></td>
	<td data-value="80" class="pic high"><div class="chart"><div class="cover-fill" style="width: 80%"></div><div class="cover-empty" style="width: 20%"></div></div></td>
	<td data-value="{s}" class="pct high">{s}%</td>
	<td data-value="5" class="abs high">{s_raw}</td>
	<td data-value="{b}" class="pct medium">{b}%</td>
	<td data-value="10" class="abs medium">{b_raw}</td>
	<td data-value="{f}" class="pct high">{f}%</td>
	<td data-value="2" class="abs high">{f_raw}</td>
	<td data-value="{l}" class="pct low">{l}%</td>
	<td data-value="4" class="abs low">{l_raw}</td>
</tr>"""


def summary_page(heading: str, rows: list[dict[str, str]], *, stats: bool = True) -> str:
    """Build an Istanbul summary page with the given heading markup and rows."""
    blocks = ""
    if stats:
        blocks = "".join(
            _STAT_BLOCK.format(pct=pct, label=label, fraction=fraction)
            for pct, label, fraction in (
                ("80%", "Statements", "40/50"),
                ("70%", "Branches", "7/10"),
                ("100%", "Functions", "5/5"),
                ("80%", "Lines", "40/50"),
            )
        )
    body = "\n".join(_ROW.format(**row) for row in rows)
    return f"""<!doctype html>
<html lang="en">
<head><title>Code coverage report</title></head>
<body>
<div class='wrapper'>
<div class='pad1'>
    <h1>{heading}</h1>
    <div class='clearfix'>{blocks}
    </div>
</div>
<div class='status-line high'></div>
<div class="pad1">
<table class="coverage-summary">
{_TABLE_HEAD}
<tbody>{body}</tbody>
</table>
</div>
</div>
</body>
</html>
"""


UTIL_DIR_ROW = {
    "name": "src/util",
    "href": "src/util/index.html",
    "s": "80",
    "s_raw": "4/5",
    "b": "70",
    "b_raw": "7/10",
    "f": "100",
    "f_raw": "2/2",
    "l": "50",
    "l_raw": "2/4",
}

MATH_FILE_ROW = {
    "name": "math.js",
    "href": "math.js.html",
    "s": "57.14",
    "s_raw": "4/7",
    "b": "50",
    "b_raw": "1/2",
    "f": "66.66",
    "f_raw": "2/3",
    "l": "57.14",
    "l_raw": "4/7",
}

ROOT_SUMMARY_HTML = summary_page("All files", [UTIL_DIR_ROW])

UTIL_SUMMARY_HTML = summary_page(
    '<a href="../../index.html">All files</a> src/util',
    [MATH_FILE_ROW],
)

MATH_FILE_HTML = """<!doctype html>
<html lang="en">
<head><title>Code coverage report for src/util/math.js</title></head>
<body>
<div class='wrapper'>
<div class='pad1'>
    <h1><a href="../../index.html">All files</a> / <a href="index.html">src/util</a> math.js</h1>
    <div class='clearfix'>
        <div class='fl pad1y space-right2'>
            <span class="strong">57.14% </span>
            <span class="quiet">Statements</span>
            <span class='fraction'>4/7</span>
        </div>
    </div>
</div>
<div class='status-line medium'></div>
<pre><table class="coverage">
<tr><td class="line-count quiet"><a name='L1'></a><a href='#L1'>1</a>
<a name='L2'></a><a href='#L2'>2</a>
<a name='L3'></a><a href='#L3'>3</a>
<a name='L4'></a><a href='#L4'>4</a>
<a name='L5'></a><a href='#L5'>5</a>
<a name='L6'></a><a href='#L6'>6</a>
<a name='L7'></a><a href='#L7'>7</a>
<a name='L8'></a><a href='#L8'>8</a>
<a name='L9'></a><a href='#L9'>9</a></td><td class="line-coverage quiet"><span class="cline-any cline-yes">2x</span>
<span class="cline-any cline-yes">2x</span>
<span class="cline-any cline-neutral">&nbsp;</span>
<span class="cline-any cline-yes">1x</span>
<span class="cline-any cline-no">&nbsp;</span>
<span class="cline-any cline-no">&nbsp;</span>
<span class="cline-any cline-no">&nbsp;</span>
<span class="cline-any cline-no">&nbsp;</span>
<span class="cline-any cline-neutral">&nbsp;</span></td><td class="text"><pre class="prettyprint lang-js">function add(a, b) {
  return a + b;
}
function div(a, b) {
  if (b === 0) <span class="cstat-no" title="statement not covered" >return null;</span>
  return <span class="cstat-no" title="statement not covered" >a / b</span>;
  <span class="cstat-no" title="statement not covered" >log(a);</span>
<span class="fstat-no" title="function not covered" >noop()</span>;
}
</pre></td></tr>
</table></pre>
</body>
</html>
"""

# Visible source of MATH_FILE_HTML, line by line.
MATH_SOURCE = [
    "function add(a, b) {",
    "  return a + b;",
    "}",
    "function div(a, b) {",
    "  if (b === 0) return null;",
    "  return a / b;",
    "  log(a);",
    "noop();",
    "}",
]

# ── Fixtures ─────────────────────────────────────────────────────


@pytest.fixture
def root_summary_doc() -> BeautifulSoup:
    return parse_html(ROOT_SUMMARY_HTML)


@pytest.fixture
def util_summary_doc() -> BeautifulSoup:
    return parse_html(UTIL_SUMMARY_HTML)


@pytest.fixture
def math_file_doc() -> BeautifulSoup:
    return parse_html(MATH_FILE_HTML)


def write_file(root: Path, rel: str, content: str) -> None:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root holding a three-page report under coverage/lcov-report."""
    report = "coverage/lcov-report"
    write_file(tmp_path, f"{report}/index.html", ROOT_SUMMARY_HTML)
    write_file(tmp_path, f"{report}/src/util/index.html", UTIL_SUMMARY_HTML)
    write_file(tmp_path, f"{report}/src/util/math.js.html", MATH_FILE_HTML)
    return tmp_path
