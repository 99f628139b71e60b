# tests/test_refactor_pipeline.py

import pytest

from latex_thebib.errors import LatexParseError, SourceReadError
from latex_thebib.refactor.pipeline import analyze, run_refactor


MAIN = (
    "\\documentclass{article}\n"
    "\\begin{document}\n"
    "First \\cite{a,b}.\n"
    "Then \\cite{b,c}.\n"
    "\\input{refs}\n"
    "\\end{document}\n"
)

REFS = (
    "\\begin{thebibliography}{99}\n"
    "\\bibitem{a} Smith, Title, 2000\n"
    "\\bibitem{b} Smith, Title, 2000\n"
    "\\bibitem{c} Jones, Other, 2001\n"
    "\\bibitem{unused} Brown, Never cited, 1999\n"
    "\\end{thebibliography}\n"
)


def test_end_to_end_dedup_and_minimal_bib(write_tree):
    root = write_tree({"main.tex": MAIN, "refs.tex": REFS})

    report = run_refactor(root / "main.tex", threshold=0.3, subdir="cleaned")

    assert report.remap == {"b": "a"}
    assert [c.to_latex() for c in report.clean_citations] == ["\\cite{a}", "\\cite{a,c}"]
    assert [(e.key, e.text) for e in report.minimal_bib] == [
        ("a", "Smith, Title, 2000"),
        ("c", "Jones, Other, 2001"),
    ]
    assert report.missing_keys == []
    assert report.written == [root / "cleaned" / "main.tex", root / "cleaned" / "refs.tex"]

    main_out = (root / "cleaned" / "main.tex").read_text(encoding="utf-8")
    assert "First \\cite{a}." in main_out
    assert "Then \\cite{a,c}." in main_out

    refs_out = (root / "cleaned" / "refs.tex").read_text(encoding="utf-8")
    assert refs_out == (
        "\\begin{thebibliography}{9}\n"
        "\\bibitem{a} Smith, Title, 2000\n\n"
        "\\bibitem{c} Jones, Other, 2001\n"
        "\\end{thebibliography}"
    )


def test_missing_entry_scenario(write_tree):
    root = write_tree(
        {
            "main.tex": (
                "\\cite{z} and \\cite{a}\n"
                "\\begin{thebibliography}{9}\n\\bibitem{a} A text\n\\end{thebibliography}\n"
            )
        }
    )

    report = run_refactor(root / "main.tex")

    assert [(e.key, e.text) for e in report.minimal_bib] == [
        ("z", "ERROR, BIBENTRY NOT FOUND."),
        ("a", "A text"),
    ]
    assert report.missing_keys == ["z"]
    out = (root / "cleaned" / "main.tex").read_text(encoding="utf-8")
    assert "\\bibitem{z} ERROR, BIBENTRY NOT FOUND." in out


def test_duplicates_across_files_share_one_remap(write_tree):
    root = write_tree(
        {
            "main.tex": "\\input{one}\n\\input{two}\n",
            "one.tex": (
                "\\citep{knuth84}\n"
                "\\begin{thebibliography}{9}\n"
                "\\bibitem{knuth84} D. Knuth, The TeXbook, 1984.\n"
                "\\end{thebibliography}\n"
            ),
            "two.tex": (
                "\\citep{Knuth:1984, lamport}\n"
                "\\begin{thebibliography}{9}\n"
                "\\bibitem{Knuth:1984} D. E. Knuth, The TeXbook, 1984.\n"
                "\\bibitem{lamport} L. Lamport, LaTeX: A Document Preparation System, 1994.\n"
                "\\end{thebibliography}\n"
            ),
        }
    )

    report = run_refactor(root / "main.tex", subdir="out")

    assert report.remap == {"Knuth:1984": "knuth84"}
    one = (root / "out" / "one.tex").read_text(encoding="utf-8")
    two = (root / "out" / "two.tex").read_text(encoding="utf-8")

    assert "\\citep{knuth84,lamport}" in two
    # every file carries the same shared bibliography
    bib = (
        "\\begin{thebibliography}{9}\n"
        "\\bibitem{knuth84} D. Knuth, The TeXbook, 1984.\n\n"
        "\\bibitem{lamport} L. Lamport, LaTeX: A Document Preparation System, 1994.\n"
        "\\end{thebibliography}"
    )
    assert bib in one
    assert bib in two


def test_analyze_writes_nothing(write_tree):
    root = write_tree({"main.tex": MAIN, "refs.tex": REFS})

    extraction, clusters = analyze(root / "main.tex", 0.3)

    assert len(extraction.entries) == 4
    assert clusters.duplicate_clusters == [[0, 1]]
    assert not (root / "cleaned").exists()


def test_unreadable_root_is_reported(tmp_path):
    with pytest.raises(SourceReadError):
        run_refactor(tmp_path / "missing.tex")


def test_parse_errors_name_the_file(write_tree):
    root = write_tree({"main.tex": "\\begin{thebibliography}{9}\n\\bibitem{a} A\n"})

    with pytest.raises(LatexParseError) as exc_info:
        run_refactor(root / "main.tex")

    assert exc_info.value.path == root / "main.tex"


def test_invalid_subdir_rejected_before_writing(write_tree):
    root = write_tree({"main.tex": MAIN, "refs.tex": REFS})

    with pytest.raises(ValueError):
        run_refactor(root / "main.tex", subdir="..")
