"""настройки по умолчанию и чтение входного файла с выражениями"""

import json
from pathlib import Path
from typing import List, Union

DEFAULT_EXPRESSION = "[10,20]+[30,40]"

# предел шагов для run(): на символ входа уходит не больше STEPS_PER_CHAR шагов лексера и pda
STEPS_PER_CHAR = 16
BASE_STEPS = 64

INPUT_FILE = "expressions.json"
REPORT_FILE = "report.md"
DIAGRAM_FILE = "lexer_automata"


def load_expressions(path: Union[str, Path] = INPUT_FILE) -> List[str]:
    """
    читает json вида {"expressions": ["[1,2]+[3,4]", ...]} или просто список строк.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("expressions")
    if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
        raise ValueError(f"{path}: ожидается список строк или объект с ключом 'expressions'")
    return data


def step_budget(text: str) -> int:
    return STEPS_PER_CHAR * len(text) + BASE_STEPS
