from __future__ import annotations

import io
from pathlib import Path

import pytest

from snippet_lid import (
    ClassifierConfig,
    EmptyInputError,
    LanguageClassifier,
    classify_buffer,
    classify_text,
    default_model,
)

PYTHON_SNIPPET = "def foo(x):\n    return x + 1\n"
GO_SNIPPET = "package main\nfunc main() {}"

CANONICAL_SNIPPETS = [
    ("ada", "with Ada.Text_IO; use Ada.Text_IO;\nprocedure Hello is\nbegin\n   Put_Line (\"Hello\");\nend Hello;"),
    ("awk", "BEGIN { FS = \",\" }\n{ sum += $3 }\nEND { print NR, sum }"),
    ("c", "#include <stdio.h>\nint main(void) {\n    printf(\"hi\\n\");\n    return 0;\n}"),
    ("clojure", "(ns app.core)\n(defn square [x] (* x x))"),
    ("cpp", "#include <iostream>\nint main() {\n    std::cout << \"hi\" << std::endl;\n}"),
    ("csharp", "using System; namespace A { class B { static void Main() { Console.WriteLine(\"hi\"); } } }"),
    ("css", "body {\n  margin: 0;\n  color: #333;\n  padding: 4px;\n}"),
    ("dart", "import 'package:flutter/material.dart';\nclass App extends StatelessWidget {\n  @override\n  Widget build(BuildContext context) => Text('hi');\n}"),
    ("delphi", "program Hello;\nuses SysUtils;\nbegin\n  WriteLn('Hello');\nend."),
    ("emacslisp", "(defun my-hello ()\n  (interactive)\n  (setq x 1)\n  (message \"hi\"))"),
    ("erlang", "-module(hello).\n-export([start/0]).\nstart() -> io:format(\"hi~n\")."),
    ("fortran", "program hello\n  implicit none\n  integer :: i\n  print *, 'Hello'\nend program hello"),
    ("fsharp", "let square x = x * x\n[1; 2; 3] |> List.map square |> printfn \"%A\""),
    ("go", "package main\n\nimport \"fmt\"\n\nfunc main() {\n\tx := 1\n\tfmt.Println(x)\n}"),
    ("groovy", "def list = [1, 2, 3]\nlist.each { println it }"),
    ("haskell", "module Main where\n\nmain :: IO ()\nmain = putStrLn \"hi\""),
    ("html", "<html>\n<body>\n<div class=\"x\">Hello</div>\n</body>\n</html>"),
    ("java", "public class Main {\n    public static void main(String[] args) {\n        System.out.println(\"hi\");\n    }\n}"),
    ("javascript", "const add = (a, b) => a + b;\nconsole.log(add(1, 2));"),
    ("json", "{\"name\": \"x\", \"version\": 1, \"private\": true}"),
    ("latex", "\\documentclass{article}\n\\begin{document}\nHi\n\\end{document}"),
    ("lisp", "(defun fact (n)\n  (if (<= n 1) 1 (* n (fact (- n 1)))))"),
    ("lua", "local t = {}\nfor i = 1, 10 do\n  t[i] = i\nend\nif x ~= nil then print(x) end"),
    ("matlab", "x = zeros(3, 3);\nfor i = 1:3\n  x(i, i) = 1;\nend\ndisp(x)"),
    ("objc", "#import <Foundation/Foundation.h>\n@interface Foo : NSObject\n@property NSString *name;\n@end"),
    ("perl", "use strict;\nmy $x = 1;\nsub hello { print \"hi\\n\"; }"),
    ("php", "<?php\n$name = 'x';\necho $name;\n?>"),
    ("prolog", "parent(tom, bob).\ngrandparent(X, Z) :- parent(X, Y), parent(Y, Z)."),
    ("python", "import os\n\ndef main():\n    print(os.getcwd())\n"),
    ("r", "library(ggplot2)\nx <- c(1, 2, 3)\nprint(mean(x))"),
    ("ruby", "class Greeter\n  def hello\n    puts \"hi\"\n  end\nend"),
    ("rust", "fn main() { let mut v = Vec::new(); println!(\"{}\", v.len()); }"),
    ("scala", "object Main {\n  def main(args: Array[String]): Unit = {\n    val x = 1\n    println(x)\n  }\n}"),
    ("shell", "#!/bin/sh\nif [ -f \"$1\" ]; then\n  echo \"found\"\nfi"),
    ("smalltalk", "Transcript show: 'Hello'; cr."),
    ("sql", "CREATE TABLE t (id INT PRIMARY KEY);"),
    ("swift", "import Foundation\nlet x = 1\nguard x > 0 else { return }\nprint(x)"),
    ("visualbasic", "Module Hello\n    Sub Main()\n        Dim x As Integer = 1\n        Console.WriteLine(x)\n    End Sub\nEnd Module"),
    ("xml", "<?xml version=\"1.0\"?>\n<note><to>Tove</to></note>"),
]


def test_classifies_python() -> None:
    assert classify_text(PYTHON_SNIPPET) == "python"


def test_classifies_go() -> None:
    assert classify_text(GO_SNIPPET) == "go"


def test_classifies_sql() -> None:
    assert classify_text("SELECT name FROM users WHERE id = 1") == "sql"


def test_empty_input_raises() -> None:
    with pytest.raises(EmptyInputError):
        classify_text("")
    with pytest.raises(EmptyInputError):
        classify_text(" \n\t ")


@pytest.mark.parametrize(("language", "text"), CANONICAL_SNIPPETS)
def test_canonical_snippet_per_language(language: str, text: str) -> None:
    assert classify_text(text) == language


def test_canonical_snippets_cover_every_label() -> None:
    assert sorted(lang for lang, _ in CANONICAL_SNIPPETS) == sorted(
        default_model().labels.languages()
    )


@pytest.mark.parametrize("text", ["hello world", "x", "}}}", "42", "<div>hi</div>"])
def test_non_empty_input_yields_a_known_label(text: str) -> None:
    m = default_model()
    assert classify_text(text, model=m) in m.labels.languages()


def test_explicit_model_handle(tiny_model) -> None:
    assert classify_text("def foo(x):", model=tiny_model) == "python"
    assert classify_text("func main", model=tiny_model) == "go"
    # Nothing recognized: defaults are go 0.1 then python 0.2.
    assert classify_text("hello world", model=tiny_model) == "python"


def test_classify_buffer_accepts_buffer_like_sources(tmp_path: Path) -> None:
    assert classify_buffer(PYTHON_SNIPPET) == "python"
    assert classify_buffer(GO_SNIPPET.encode("utf-8")) == "go"
    assert classify_buffer(io.StringIO(PYTHON_SNIPPET)) == "python"
    assert classify_buffer(io.BytesIO(GO_SNIPPET.encode("utf-8"))) == "go"

    p = tmp_path / "main.go"
    p.write_text(GO_SNIPPET, encoding="utf-8")
    with p.open("r", encoding="utf-8") as f:
        assert classify_buffer(f) == "go"


def test_classify_buffer_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        classify_buffer(12345)


def test_analyze_reports_votes_and_counts(tiny_model) -> None:
    res = LanguageClassifier(model=tiny_model).analyze("def foo(x):")
    assert res.language == "python"
    assert res.label_id == 1
    assert res.n_tokens == 9
    assert res.n_known_tokens == 2
    assert list(res.votes) == ["python"]
    assert res.votes["python"] == pytest.approx(1.1)


def test_event_hook_is_ordered_and_non_blocking(tiny_model) -> None:
    events: list[dict[str, object]] = []

    def hook(e: dict[str, object]) -> None:
        events.append(e)
        raise RuntimeError("hooks must not break classification")

    clf = LanguageClassifier(model=tiny_model, on_event=hook)
    assert clf.classify("func main") == "go"
    assert [e["stage"] for e in events] == ["tokenize", "vectorize", "vote", "done"]


def test_max_input_chars_truncates_before_tokenizing(tiny_model) -> None:
    clf = LanguageClassifier(model=tiny_model, config=ClassifierConfig(max_input_chars=3))
    with pytest.raises(EmptyInputError):
        clf.classify("   def foo(x):")
    assert clf.classify("def foo(x):") == "python"


def test_config_model_path_selects_asset(tiny_model_path: Path) -> None:
    clf = LanguageClassifier(config=ClassifierConfig(model_path=str(tiny_model_path)))
    assert clf.model.labels.languages() == ("go", "python")
    assert clf.classify_many(["func main", "def foo(x):"]) == ["go", "python"]


def test_classify_text_runs_the_classifier_pipeline(monkeypatch, tiny_model) -> None:
    seen: list[str] = []
    real_analyze = LanguageClassifier.analyze

    def spy(self, text: str):
        seen.append(text)
        return real_analyze(self, text)

    monkeypatch.setattr(LanguageClassifier, "analyze", spy)
    assert classify_text("func main", model=tiny_model) == "go"
    assert classify_buffer(b"def foo(x):", model=tiny_model) == "python"
    assert seen == ["func main", "def foo(x):"]
