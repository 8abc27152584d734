"""Tests for zemdomu.project.ProjectLinter."""

from __future__ import annotations

from pathlib import Path

import pytest

from zemdomu import project
from zemdomu.config import LinterOptions
from zemdomu.exceptions import ScanSupersededError
from zemdomu.linting.models import PARSE_ERROR_RULE
from zemdomu.project import ProjectLinter, discover_files

PAGE = """import Button from './Button';

export default function Page() {
  return (
    <main>
      <h1>Welcome</h1>
      <Button />
    </main>
  );
}
"""

BUTTON_WITH_H1 = """export default function Button() {
  return <h1>Click</h1>;
}
"""

BUTTON_FIXED = """export default function Button() {
  return <button>Click</button>;
}
"""

COMPONENT_A = """export default function ComponentA() {
  return <section><h3>Details</h3></section>;
}
"""

PAGE_WITH_A = """import ComponentA from './ComponentA';

export default function Page() {
  return (
    <main>
      <h1>Title</h1>
      <ComponentA />
    </main>
  );
}
"""

PAGE_WITH_CARD = """import Card from './Card';

export default function Page() {
  return (
    <main>
      <h1>Title</h1>
      <Card />
    </main>
  );
}
"""

CARD_WITH_SKIP = """export default function Card() {
  return <section><h2>A</h2><h4>B</h4></section>;
}
"""

APP_WITH_ROUTE = """import Home from './Home';

export default function App() {
  return (
    <main>
      <h1>App</h1>
      <Route path="/" element={<Home />} />
    </main>
  );
}
"""

HOME = """export default function Home() {
  return <h1>Home</h1>;
}
"""


def _rules(results) -> list[str]:
    return [r.rule for r in results]


@pytest.fixture
def linter(tmp_path: Path) -> ProjectLinter:
    return ProjectLinter(LinterOptions(root_dir=tmp_path, max_workers=2))


class TestCrossComponent:
    def test_extra_h1_from_component(self, linter, write_files) -> None:
        files = write_files({"Page.tsx": PAGE, "Button.tsx": BUTTON_WITH_H1})
        page, button = str(files["Page.tsx"]), str(files["Button.tsx"])

        results = linter.lint_files([page, button])
        cross = [r for r in results[page] if r.file_path == page]
        assert len(cross) == 1
        assert cross[0].rule == "singleH1"
        assert (cross[0].line, cross[0].column) == (6, 6)
        assert "component 'Button'" in cross[0].message
        assert results[button] == []

    def test_fix_in_component_clears_result(self, linter, write_files) -> None:
        files = write_files({"Page.tsx": PAGE, "Button.tsx": BUTTON_WITH_H1})
        page, button = str(files["Page.tsx"]), str(files["Button.tsx"])
        linter.lint_files([page, button])

        results = linter.lint_file(button, text=BUTTON_FIXED)
        assert results[page] == []
        assert results[button] == []

    def test_single_file_lint_reports_other_file(self, linter, write_files) -> None:
        files = write_files({"Page.tsx": PAGE, "Button.tsx": BUTTON_WITH_H1})
        page, button = str(files["Page.tsx"]), str(files["Button.tsx"])
        linter.lint_file(page)

        results = linter.lint_file(button)
        assert set(results) == {page, button}
        assert _rules(results[page]) == ["singleH1"]

    def test_heading_skip_at_usage_site(self, linter, write_files) -> None:
        files = write_files({"Page.tsx": PAGE_WITH_A, "ComponentA.tsx": COMPONENT_A})
        page, child = str(files["Page.tsx"]), str(files["ComponentA.tsx"])

        results = linter.lint_files([page, child])
        [cross] = [r for r in results[page] if r.rule == "enforceHeadingOrder"]
        assert cross.message == "Cross-component heading level skipped: <h3> after <h1>"
        assert (cross.line, cross.column) == (6, 6)
        assert [r.file_path for r in cross.related] == [child, page]
        assert _rules(results[child]) == []

    def test_skip_inside_child_reported_at_usage(self, linter, write_files) -> None:
        files = write_files({"Page.tsx": PAGE_WITH_CARD, "Card.tsx": CARD_WITH_SKIP})
        page, card = str(files["Page.tsx"]), str(files["Card.tsx"])

        results = linter.lint_files([page, card])
        [cross] = [r for r in results[page] if r.rule == "enforceHeadingOrder"]
        assert cross.message == "Cross-component heading level skipped: <h4> after <h2>"
        assert (cross.line, cross.column) == (6, 6)
        assert [r.file_path for r in cross.related] == [card, card]
        assert "enforceHeadingOrder" in _rules(results[card])

    def test_component_passed_as_prop_is_used(self, linter, write_files) -> None:
        files = write_files({"App.tsx": APP_WITH_ROUTE, "Home.tsx": HOME})
        app, home = str(files["App.tsx"]), str(files["Home.tsx"])

        results = linter.lint_files([app, home])
        [cross] = [r for r in results[app] if r.rule == "singleH1"]
        assert (cross.file_path, cross.line, cross.column) == (app, 6, 31)
        assert "component 'Home'" in cross.message
        assert results[home] == []

    def test_cycle_terminates(self, linter, write_files) -> None:
        files = write_files(
            {
                "A.tsx": "import B from './B';\nexport const A = () => <div><h1>A</h1><B /></div>;\n",
                "B.tsx": "import A from './A';\nexport const B = () => <div><A /></div>;\n",
            }
        )
        results = linter.lint_files(list(files.values()))
        assert set(results) == {str(p) for p in files.values()}

    def test_disabled_cross_component(self, tmp_path: Path, write_files) -> None:
        files = write_files({"Page.tsx": PAGE, "Button.tsx": BUTTON_WITH_H1})
        linter = ProjectLinter(LinterOptions(root_dir=tmp_path, cross_component_analysis=False))
        results = linter.lint_files(list(files.values()))
        assert all(result == [] for result in results.values())

    def test_html_files_stay_out_of_graph(self, linter, write_files) -> None:
        files = write_files({"index.html": '<html lang="en"><h1>a</h1><img></html>'})
        results = linter.lint_files(list(files.values()))
        assert _rules(results[str(files["index.html"])]) == ["requireAltText"]
        assert len(linter.registry) == 0


class TestBatchBehaviour:
    def test_metrics_recorded(self, linter, write_files) -> None:
        files = write_files({"Page.tsx": PAGE, "Button.tsx": BUTTON_WITH_H1})
        linter.lint_files(list(files.values()))
        page_metrics = linter.metrics[str(files["Page.tsx"])]
        assert {"total", "read", "lint", "graph"} <= set(page_metrics)
        assert "analyze" in linter.metrics["crossComponent"]

    def test_parse_error_file(self, linter, write_files) -> None:
        files = write_files({"Broken.tsx": "const a = <div><span></div>;"})
        path = str(files["Broken.tsx"])
        results = linter.lint_files([path])
        assert _rules(results[path]) == [PARSE_ERROR_RULE]
        assert linter.registry.get(path).headings == []

    def test_unexpected_failure_stays_with_its_file(
        self, linter, write_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        files = write_files(
            {
                "bad.html": "<p>boom</p>",
                "good.html": '<html lang="en"><h1>a</h1><img></html>',
            }
        )
        original = project.lint_document

        def crashing(document, options):
            if "boom" in document.source.text:
                raise RuntimeError("rule crashed")
            return original(document, options)

        monkeypatch.setattr(project, "lint_document", crashing)
        results = linter.lint_files(list(files.values()))
        [failure] = results[str(files["bad.html"])]
        assert failure.rule == PARSE_ERROR_RULE
        assert failure.severity == "error"
        assert "rule crashed" in failure.message
        assert _rules(results[str(files["good.html"])]) == ["requireAltText"]

    def test_unencodable_text_does_not_abort_batch(self, linter, write_files) -> None:
        files = write_files(
            {
                "A.tsx": "export const A = () => <p>ok</p>;\n",
                "index.html": '<html lang="en"><h1>a</h1><img></html>',
            }
        )
        component = str(files["A.tsx"])
        results = linter.lint_files(
            list(files.values()), texts={component: "export const A = () => <p>\ud800</p>;"}
        )
        assert set(results) == {component, str(files["index.html"])}
        assert _rules(results[str(files["index.html"])]) == ["requireAltText"]

    def test_unsupported_files_skipped(self, linter, write_files) -> None:
        files = write_files({"notes.md": "# hi", "index.html": "<p>ok</p>"})
        results = linter.lint_files(list(files.values()))
        assert list(results) == [str(files["index.html"])]

    def test_removed_file_leaves_registry(self, linter, write_files) -> None:
        files = write_files({"Page.tsx": PAGE, "Button.tsx": BUTTON_WITH_H1})
        page, button = str(files["Page.tsx"]), str(files["Button.tsx"])
        linter.lint_files([page, button])

        files["Button.tsx"].unlink()
        results = linter.lint_file(button)
        assert button not in linter.registry
        assert results[page] == []

    def test_superseded_scan_is_discarded(
        self, linter, write_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        files = write_files({"Page.tsx": PAGE})
        original = linter._lint_one

        def racing(path, text, generation):
            linter._start_scan()
            return original(path, text, generation)

        monkeypatch.setattr(linter, "_lint_one", racing)
        with pytest.raises(ScanSupersededError):
            linter.lint_files([files["Page.tsx"]])
        assert len(linter.registry) == 0

    def test_clear(self, linter, write_files) -> None:
        files = write_files({"Page.tsx": PAGE})
        linter.lint_files(list(files.values()))
        linter.clear()
        assert len(linter.registry) == 0
        assert linter.metrics == {}


class TestWorkspace:
    def test_lint_workspace_skips_excluded(self, linter, write_files) -> None:
        files = write_files(
            {
                "src/Page.tsx": PAGE,
                "src/Button.tsx": BUTTON_WITH_H1,
                "node_modules/pkg/Widget.jsx": "const W = () => <img />;",
                "dist/index.html": "<img>",
            }
        )
        results = linter.lint_workspace()
        assert set(results) == {str(files["src/Page.tsx"]), str(files["src/Button.tsx"])}
        assert _rules(results[str(files["src/Page.tsx"])]) == ["singleH1"]

    def test_discover_files(self, write_files, tmp_path: Path) -> None:
        write_files({"a.html": "", "b.jsx": "", "c.ts": "", "d/e.tsx": "", "out/f.html": ""})
        found = discover_files(tmp_path, ("**/out/**",))
        assert [p.name for p in found] == ["a.html", "b.jsx", "e.tsx"]
