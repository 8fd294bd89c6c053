"""
Timecode calculator

Evaluates arithmetic on timecodes written the way editors type them:

    Calculator(25).evaluate("10m + 10f")            -> 00:10:00:10
    Calculator(25).evaluate("(1h 4f - 4f) / 2")     -> 00:30:00:00
    Calculator(25).evaluate("00:00:10:00 * 3")      -> 00:00:30:00

Every atom is parsed with Timecode.parse, and consecutive atoms are read as
one timecode ("1h 4f"). The right-hand side of * and / is a scalar: a plain
number is used as is, anything else contributes its total frame count.
* and / bind tighter than + and -, parentheses group.
"""

import argparse
import logging
import re
import sys
from collections import deque
from typing import Deque, List, Tuple, Type, Union

from frametc.errors import CannotParse
from frametc.framerate import DEFAULT_FPS, FrameRate, coerce_fps, parse_fps
from frametc.timecode import Timecode

# Module-level logger
_logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r'\s*(?:(?P<op>[-+*/()])|(?P<atom>[^-+*/()\s]+))')
NUMBER_RE = re.compile(r'[0-9]+(?:\.[0-9]+)?')

Token = Tuple[str, str]


def tokenize(expression: str) -> List[Token]:
    """
    Split an expression into ("op", text) and ("atom", text) tokens.

    Raises:
        CannotParse: if the expression is empty
    """
    tokens = [
        ("op", match.group("op")) if match.group("op") else ("atom", match.group("atom"))
        for match in TOKEN_RE.finditer(expression)
    ]
    if not tokens:
        raise CannotParse(f"Cannot evaluate {expression!r}, expression is empty")
    return tokens


class Calculator:
    """
    Infix calculator over timecodes at a single frame rate.
    """

    def __init__(self, fps: Union[float, FrameRate] = DEFAULT_FPS,
                 timecode_class: Type[Timecode] = Timecode):
        """
        Initialize calculator.

        Args:
            fps: Frame rate used to parse every atom
            timecode_class: Class used to build timecodes
        """
        self.fps = coerce_fps(fps)
        self.timecode_class = timecode_class

    def evaluate(self, expression: str) -> Timecode:
        """
        Evaluate an expression.

        Raises:
            CannotParse: on a syntax error or an atom that is not a timecode
            RangeError: if an intermediate result is out of range
            ZeroDivisionError: on division by zero
        """
        tokens = deque(tokenize(expression))
        result = self._expr(tokens)
        if tokens:
            raise CannotParse(f"Cannot evaluate {expression!r}, unexpected {tokens[0][1]!r}")

        _logger.debug(f"{expression!r} @{self.fps} = {result}")
        return result

    def _expr(self, tokens: Deque[Token]) -> Timecode:
        value = self._term(tokens)
        while tokens and tokens[0] in (("op", "+"), ("op", "-")):
            op = tokens.popleft()[1]
            operand = self._term(tokens)
            value = value + operand if op == "+" else value - operand
        return value

    def _term(self, tokens: Deque[Token]) -> Timecode:
        value = self._factor(tokens)
        while tokens and tokens[0] in (("op", "*"), ("op", "/")):
            op = tokens.popleft()[1]
            scalar = self._scalar(tokens)
            value = value * scalar if op == "*" else value / scalar
        return value

    def _scalar(self, tokens: Deque[Token]):
        """Read the right-hand side of * or /."""
        if (tokens and tokens[0][0] == "atom" and NUMBER_RE.fullmatch(tokens[0][1])
                and (len(tokens) == 1 or tokens[1][0] != "atom")):
            text = tokens.popleft()[1]
            return float(text) if '.' in text else int(text)
        return self._factor(tokens).total_frames

    def _factor(self, tokens: Deque[Token]) -> Timecode:
        if not tokens:
            raise CannotParse("Unexpected end of expression")

        kind, text = tokens.popleft()
        if (kind, text) == ("op", "("):
            value = self._expr(tokens)
            if not tokens or tokens.popleft() != ("op", ")"):
                raise CannotParse("Missing closing parenthesis")
            return value
        if kind == "op":
            raise CannotParse(f"Unexpected {text!r}")

        atoms = [text]
        while tokens and tokens[0][0] == "atom":
            atoms.append(tokens.popleft()[1])
        return self.timecode_class.parse(" ".join(atoms), self.fps)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Evaluate timecode arithmetic.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s 10m + 10f                     # 00:10:00:10
  %(prog)s "01:00:00:00 - 1h + 4f"       # 00:00:00:04
  %(prog)s -r 30 "(1m + 15s) / 3"        # 00:00:25:00
  %(prog)s --uint 05:34:42:05            # 87310853
        """,
    )
    parser.add_argument(
        "expression",
        nargs="+",
        help="Expression; quote it if it contains * or parentheses",
    )
    parser.add_argument(
        "-r", "--fps",
        type=str,
        default=str(DEFAULT_FPS),
        help=f"Frame rate, e.g. 25, 29.97 or 30000/1001 (default: {DEFAULT_FPS})",
    )
    parser.add_argument(
        "--uint",
        action="store_true",
        help="Print the result as a BCD bit-packed integer",
    )
    parser.add_argument(
        "--fraction",
        action="store_true",
        help="Print the result with fractional seconds (HH:MM:SS.ff)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    expression = " ".join(args.expression)
    try:
        result = Calculator(parse_fps(args.fps)).evaluate(expression)
    except (ValueError, ZeroDivisionError) as e:
        print(f"Error evaluating {expression!r}: {e}", file=sys.stderr)
        sys.exit(1)

    if args.uint:
        print(result.to_uint())
    elif args.fraction:
        print(result.with_frames_as_fraction())
    else:
        print(result)

    if args.verbose:
        print(f"  Total frames: {result.total_frames}")
        print(f"  Frame rate: {result.fps} fps")


if __name__ == "__main__":
    main()
