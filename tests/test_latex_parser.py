# tests/test_latex_parser.py

import pytest

from latex_thebib.errors import IncludeNotFoundError, LatexParseError
from latex_thebib.parsing.latex_parser import (
    Command,
    find_thebibliography,
    include_targets,
    is_citation,
    iter_commands,
    parse_bibliography,
    parse_citation,
    replace_thebibliography,
    resolve_include,
)


BIB_BLOCK = (
    "\\begin{thebibliography}{99}\n"
    "\\bibitem{smith00} Smith, {\\it Title},\n2000.\n\n"
    "\\bibitem[Jones]{jones01}   Jones,  Other, 2001.\n"
    "\\end{thebibliography}"
)


def test_commands_keep_source_order():
    text = "\\citep{a} then \\input{ch1} then \\citet{b, c} and \\include{ch2}"

    cmds = list(iter_commands(text))

    assert [c.kind for c in cmds] == ["citep", "input", "citet", "include"]
    assert cmds[2].raw == "\\citet{b, c}"


def test_parse_citation_splits_and_trims_keys():
    cmd = Command("cite", " a ,b,  a ", "\\cite{ a ,b,  a }")

    citation = parse_citation(cmd)

    assert is_citation(cmd)
    assert citation.keys == ["a", "b", "a"]
    assert citation.kind == "cite"
    assert citation.raw == "\\cite{ a ,b,  a }"
    assert citation.to_latex() == "\\cite{a,b,a}"


def test_parse_citation_without_keys_is_a_parse_error():
    cmd = Command("cite", " , ", "\\cite{ , }")

    with pytest.raises(LatexParseError) as exc_info:
        parse_citation(cmd)

    assert exc_info.value.token == "\\cite{ , }"


def test_includeonly_takes_a_list():
    assert include_targets(Command("includeonly", "a, b", "")) == ["a", "b"]
    assert include_targets(Command("input", " chapters/one ", "")) == ["chapters/one"]


def test_bibliography_entries_are_cleaned():
    entries = parse_bibliography("Intro.\n" + BIB_BLOCK + "\nAfter.")

    assert [e.key for e in entries] == ["smith00", "jones01"]
    assert entries[0].text == "Smith, {\\em Title}, 2000."
    assert entries[1].text == "Jones, Other, 2001."


def test_several_bibliography_blocks():
    text = BIB_BLOCK + "\nmiddle\n" + BIB_BLOCK.replace("smith00", "other")

    spans = find_thebibliography(text)
    entries = parse_bibliography(text)

    assert len(spans) == 2
    assert [e.key for e in entries] == ["smith00", "jones01", "other", "jones01"]


def test_empty_bibliography_has_no_entries():
    assert parse_bibliography("\\begin{thebibliography}{0}\n\\end{thebibliography}") == []


def test_unterminated_bibliography_raises():
    with pytest.raises(LatexParseError):
        find_thebibliography("\\begin{thebibliography}{9}\n\\bibitem{a} A")


def test_bibitem_without_key_raises():
    text = "\\begin{thebibliography}{9}\n\\bibitem no key here\n\\end{thebibliography}"

    with pytest.raises(LatexParseError):
        parse_bibliography(text)


def test_replace_thebibliography_replaces_every_block():
    text = "A\n" + BIB_BLOCK + "\nB\n" + BIB_BLOCK + "\nC"

    out = replace_thebibliography(text, "BIB")

    assert out == "A\nBIB\nB\nBIB\nC"


def test_replace_block_with_backslashes_is_verbatim():
    block = "\\begin{thebibliography}{9}\n\\bibitem{a} \\em x\n\\end{thebibliography}"

    assert replace_thebibliography(BIB_BLOCK, block) == block


def test_resolve_include_tries_extensions_in_order(tmp_path):
    (tmp_path / "chap.tex").write_text("x", encoding="utf-8")
    (tmp_path / "refs.bbl").write_text("x", encoding="utf-8")
    main = tmp_path / "main.tex"

    exts = ["", ".tex", ".latex", ".bib", ".bbl"]

    assert resolve_include(main, "chap", exts) == tmp_path / "chap.tex"
    assert resolve_include(main, "chap.tex", exts) == tmp_path / "chap.tex"
    assert resolve_include(main, "refs", exts) == tmp_path / "refs.bbl"


def test_resolve_include_missing_reports_candidates(tmp_path):
    main = tmp_path / "main.tex"

    with pytest.raises(IncludeNotFoundError) as exc_info:
        resolve_include(main, "ghost", ["", ".tex"])

    err = exc_info.value
    assert err.target == "ghost"
    assert err.tried == [tmp_path / "ghost", tmp_path / "ghost.tex"]
