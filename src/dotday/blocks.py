"""
Line classification and block segmentation
"""
import re
from typing import Iterable

Block = list[str]

COMMENT_PATTERN = re.compile(r'^\s*;')
LINE_BREAK = re.compile(r'\r?\n')


def is_comment(line: str) -> bool:
    return COMMENT_PATTERN.match(line) is not None


def is_blank(line: str) -> bool:
    return line.strip() == ''


def split_blocks(lines: Iterable[str]) -> list[Block]:
    """Group lines into blocks separated by blank lines.

    Comment lines are dropped before grouping, so a comment never splits
    or ends a block.

    Args:
        lines: Source lines without line terminators

    Returns:
        Ordered list of non-empty blocks
    """
    blocks: list[Block] = []
    current: Block = []

    for line in lines:
        if is_comment(line):
            continue
        if is_blank(line):
            if current:
                blocks.append(current)
            current = []
        else:
            current.append(line)

    if current:
        blocks.append(current)
    return blocks


def read_blocks(text: str) -> list[Block]:
    return split_blocks(LINE_BREAK.split(text))
