import os
import sys
import logging
import argparse
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from dotenv import load_dotenv
from tqdm import tqdm

from ..models.errors import InvalidArgumentError, PixelshopError
from ..pipeline.commands import execute
from ..pipeline.script_parser import Quit, RunScript, parse_line
from ..services.image_service import ImageService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

MAX_SCRIPT_DEPTH = int(os.getenv("MAX_SCRIPT_DEPTH", "16"))


class ScriptAborted(Exception):
    """Raised in strict mode to unwind nested scripts after the first failure."""


class ScriptRunner:
    """
    Feeds script statements to an ImageService.

    In the default mode a failing line is reported and the runner moves on;
    with ``strict=True`` the first failure stops the whole run.
    """

    def __init__(self, service: Optional[ImageService] = None, *,
                 strict: bool = False, out: Optional[TextIO] = None,
                 show_progress: bool = False):
        self.service = service if service is not None else ImageService()
        self.strict = strict
        self.out = out if out is not None else sys.stdout
        self.show_progress = show_progress
        self.errors: List[str] = []
        self._depth = 0
        self._stopped = False

    def run_file(self, path) -> None:
        path = Path(path)
        if self._depth >= MAX_SCRIPT_DEPTH:
            raise InvalidArgumentError(f"Scripts nested deeper than {MAX_SCRIPT_DEPTH}: {path}")
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as err:
            raise InvalidArgumentError(f"Cannot read script {path}: {err}") from err

        logger.info(f"Running script {path} ({len(lines)} lines)")
        self._depth += 1
        try:
            self.run_lines(lines, source=path.name, base_dir=path.parent)
        finally:
            self._depth -= 1

    def run_lines(self, lines: Iterable[str], source: str = "<stdin>",
                  base_dir: Optional[Path] = None) -> None:
        """
        Run statements one line at a time.
        Relative ``run`` paths resolve against *base_dir* (the including
        script's directory), or the working directory when it is None.
        """
        progress = tqdm(lines, desc=source, ncols=70, disable=not self.show_progress)
        for line_no, line in enumerate(progress, 1):
            if self._stopped:
                break
            try:
                statement = parse_line(line)
                if statement is None:
                    continue
                if isinstance(statement, Quit):
                    self._stopped = True
                    break
                if isinstance(statement, RunScript):
                    nested = Path(statement.path)
                    if base_dir is not None and not nested.is_absolute():
                        nested = base_dir / nested
                    self.run_file(nested)
                else:
                    execute(statement, self.service)
            except PixelshopError as err:
                self._report(f"{source}:{line_no}: {err}")

    def _report(self, message: str) -> None:
        self.errors.append(message)
        logger.warning(message)
        print(f"Error: {message}", file=self.out)
        if self.strict:
            raise ScriptAborted(message)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="pixelshop",
        description="Run image editing commands from a script file or stdin.",
    )
    ap.add_argument("-f", "--file", help="script file to run (default: read stdin)")
    ap.add_argument("--strict", action="store_true",
                    help="stop at the first failing command")
    ap.add_argument("--progress", action="store_true",
                    help="show a progress bar while running a script file")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    runner = ScriptRunner(strict=args.strict, show_progress=args.progress)
    try:
        if args.file:
            runner.run_file(args.file)
        else:
            runner.run_lines(sys.stdin)
    except ScriptAborted:
        return 1
    except InvalidArgumentError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    return 1 if runner.errors else 0


if __name__ == "__main__":
    sys.exit(main())
