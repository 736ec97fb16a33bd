"""
пошаговый симулятор разбора матричных выражений — командная строка

примеры)
    $ python -m matrix_automata "[10,20]+[30,40]"
    $ python -m matrix_automata "[[1,2],[3,4]]*[[5,6],[7,8]]" --report report.md --dot automata
    $ python -m matrix_automata --step
    $ python -m matrix_automata --file expressions.json
    $ python -m matrix_automata --grammar

режим --step: Enter — один шаг, 'r <выражение>' — новый ввод, 'q' — выход.
"""

import argparse
import sys
from typing import List, Optional, Tuple

from . import report
from .config import DEFAULT_EXPRESSION, load_expressions
from .diagram import draw_automata
from .engine import EngineSnapshot, ParserEngine
from .logsetup import setup_logging


def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def run_expression(text: str, max_steps: Optional[int] = None) -> Tuple[EngineSnapshot, int]:
    engine = ParserEngine(text)
    steps = engine.run(max_steps)
    return engine.inspect(), steps


def interactive(engine: ParserEngine, read=input) -> EngineSnapshot:
    """цикл ручного шагания; read подменяется в тестах"""
    report.print_status(engine.inspect())
    while True:
        try:
            cmd = read("step> ").strip()
        except EOFError:
            break
        if cmd in ("q", "quit", "exit"):
            break
        if cmd.startswith("r "):
            engine.submit(cmd[2:].strip())
        elif cmd in ("t", "trace"):
            report.print_trace(engine.inspect())
            continue
        elif cmd in ("s", "stack"):
            report.print_stack(engine.inspect())
            continue
        elif engine.done:
            print("[i] разбор завершён; 'r <выражение>' — новый ввод, 'q' — выход")
            continue
        else:
            engine.advance()
        snap = engine.inspect()
        report.print_status(snap)
        if snap.done:
            report.print_result(snap)
    return engine.inspect()


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="matrix_automata",
                                 description="пошаговый лексический и синтаксический разбор матричных выражений")
    ap.add_argument("expression", nargs="?", default=None,
                    help=f"выражение (по умолчанию {DEFAULT_EXPRESSION!r})")
    ap.add_argument("--step", action="store_true", help="ручное пошаговое выполнение")
    ap.add_argument("--file", metavar="JSON", help="пакетный прогон выражений из json-файла")
    ap.add_argument("--report", metavar="MD", help="сохранить отчёт в markdown")
    ap.add_argument("--dot", metavar="NAME", help="сохранить граф автоматов (NAME.dot, NAME.png)")
    ap.add_argument("--grammar", action="store_true", help="напечатать грамматику и таблицу предсказаний")
    ap.add_argument("--max-steps", type=int, default=None,
                    help="предел шагов (по умолчанию зависит от длины выражения)")
    ap.add_argument("--log-file", metavar="PATH", help="дублировать журнал в файл")
    ap.add_argument("-D", "--debug", action="store_true", help="подробный журнал (DEBUG)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging("DEBUG" if args.debug else "WARNING", args.log_file)

    if args.grammar:
        report.print_grammar()
        if args.expression is None and not args.file and not args.step:
            return 0

    if args.file:
        try:
            exprs = load_expressions(args.file)
        except (OSError, ValueError) as e:
            _eprint(f"[error] {e}")
            return 2
        results = [run_expression(x, args.max_steps) for x in exprs]
        report.print_summary(results)
        return 0 if all(snap.accepted for snap, _ in results) else 1

    text = args.expression if args.expression is not None else DEFAULT_EXPRESSION

    if args.step:
        snap = interactive(ParserEngine(text))
    else:
        snap, steps = run_expression(text, args.max_steps)
        report.print_tokens(snap)
        report.print_trace(snap)
        print(f"\nшагов: {steps}")
        report.print_result(snap)

    if args.report:
        report.save_report(snap, args.report)
    if args.dot:
        draw_automata(snap, args.dot)

    return 0 if snap.accepted else 1
