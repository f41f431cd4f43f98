"""Interactive menu for storing short string records in a B+ tree."""

from __future__ import annotations

import argparse
import re
import sys
from typing import Optional, TextIO

from .bplustree import BPlusTree
from .keys import KeyField, encode_key, make_comparator
from .sqlenums import SqlToken

BUFFER_SIZE = 32
KEY_FIELDS = (KeyField(SqlToken.STRING, BUFFER_SIZE),)

MENU = (
    "1. Insert",
    "2. Delete",
    "3. Update",
    "4. Read",
    "5. Destroy",
    "6. Iterate over all Records",
    "7. exit",
)

_CHOICE = re.compile(r"\s*([+-]?\d+)")


def _text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode(errors="replace")


class KeyValueShell:
    """Menu-driven shell over a B+ tree of string keys and string values."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self._in = stdin if stdin is not None else sys.stdin
        self._out = stdout if stdout is not None else sys.stdout
        self.tree = BPlusTree(compare=make_comparator(KEY_FIELDS))

    def _write(self, text: str) -> None:
        self._out.write(text)

    def _read_line(self, prompt: str = "") -> str:
        self._write(prompt)
        line = self._in.readline()
        if not line:
            raise EOFError
        return line.split("\n", 1)[0][:BUFFER_SIZE - 1]

    def _read_key(self, prompt: str) -> bytes:
        return encode_key([self._read_line(prompt)], KEY_FIELDS)

    def _read_choice(self) -> Optional[int]:
        while True:
            line = self._in.readline()
            if not line:
                raise EOFError
            if not line.strip():
                continue
            match = _CHOICE.match(line)
            return int(match.group(1)) if match else None

    def _insert(self) -> None:
        key = self._read_key("Insert Key : ")
        value = self._read_line("Insert Value : ")
        self.tree.insert(key, value)

    def _delete(self) -> None:
        self.tree.delete(self._read_key("Delete Key ? : "))

    def _update(self) -> None:
        key = self._read_key("Insert Key for Update ? : ")
        old = self.tree.query(key)
        if old is None:
            self._write("Key not found\n")
            return
        self._write(f"Old Value = {old}\n")
        self.tree.modify(key, self._read_line("Insert new Value ? : "))

    def _read(self) -> None:
        value = self.tree.query(self._read_key("Insert Key for Read ? : "))
        if value is None:
            self._write("Key not found\n")
        else:
            self._write(f"Value = {value}\n")

    def _destroy(self) -> None:
        self.tree.destroy()
        self._write("Successfully Destroyed the B+ Tree\n")

    def _iterate(self) -> None:
        for key, value in self.tree.items():
            self._write(f"Key = {_text(key)}, Value = {value}\n")

    def run(self) -> None:
        """Serve menu commands until exit, an unknown choice or end of input."""
        actions = {
            1: self._insert,
            2: self._delete,
            3: self._update,
            4: self._read,
            5: self._destroy,
            6: self._iterate,
        }
        try:
            while True:
                self._write("".join(f"{item}\n" for item in MENU))
                action = actions.get(self._read_choice())
                if action is None:
                    return
                action()
        except EOFError:
            return


def main(argv: Optional[list[str]] = None) -> int:
    """Run the interactive shell on standard input and output."""
    parser = argparse.ArgumentParser(
        prog="bptreedb", description="Store and query string records in a B+ tree."
    )
    parser.parse_args(argv if argv is not None else sys.argv[1:])
    KeyValueShell(sys.stdin, sys.stdout).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())