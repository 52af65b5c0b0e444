from __future__ import annotations

import argparse
import logging
import shlex
import sys
from typing import Callable, Dict, Iterable, List, Optional, TextIO, Tuple

import string_queue as sq
from config import load_config
from logging_setup import setup_logging
from string_queue import StringQueue

logger = logging.getLogger(__name__)

NULL_TOKEN = "NULL"

HELP_TEXT = """\
new            新しい空の Queue を作る
free           Queue を破棄する
ih STR [N]     先頭に STR を N 回追加（STR=NULL で文字列なし）
it STR [N]     末尾に STR を N 回追加
rh [STR]       先頭を取り出す（STR 指定時は内容を照合）
rhq            先頭を取り出す（内容はコピーしない）
size [N]       要素数（N 指定時は照合）
reverse        逆順にする
sort           昇順に並べ替える
show           内容を表示
help           このヘルプ
quit           終了"""


def _parse_count(token: str) -> Optional[int]:
    try:
        n = int(token)
    except ValueError:
        return None
    return n if n >= 0 else None


def _parse_value(token: str) -> Optional[str]:
    return None if token == NULL_TOKEN else token


class QueueConsole:
    """
    1 つの Queue をコマンドで操作するインタプリタ
    各コマンドは (ok, message) を返す
    """

    def __init__(self, buffer_size: int = 1024, show_limit: int = 50) -> None:
        if buffer_size <= 0:
            raise ValueError("buffer_size must be > 0")
        self.buffer_size = buffer_size
        self.show_limit = show_limit
        self.queue: Optional[StringQueue] = None
        self.finished = False

        self._commands: Dict[str, Callable[[List[str]], Tuple[bool, str]]] = {
            "new": self.do_new,
            "free": self.do_free,
            "ih": self.do_insert_head,
            "it": self.do_insert_tail,
            "rh": self.do_remove_head,
            "rhq": self.do_remove_head_quiet,
            "size": self.do_size,
            "reverse": self.do_reverse,
            "sort": self.do_sort,
            "show": self.do_show,
            "help": self.do_help,
            "quit": self.do_quit,
        }

    # -------------------------
    # 実行
    # -------------------------
    def execute(self, line: str) -> Tuple[bool, str]:
        try:
            tokens = shlex.split(line, comments=True)
        except ValueError as e:
            return False, f"構文エラー: {e}"
        if not tokens:
            return True, ""

        name, args = tokens[0], tokens[1:]
        handler = self._commands.get(name)
        if handler is None:
            logger.warning("unknown command: %s", name)
            return False, f"不明なコマンド: {name}"

        logger.debug("cmd> %s", line.strip())
        ok, msg = handler(args)
        if not ok:
            logger.warning("%s failed: %s", name, msg)
        return ok, msg

    def run(self, lines: Iterable[str], out: Optional[TextIO] = None) -> int:
        """全行を実行し、失敗したコマンドの数を返す"""
        out = out or sys.stdout
        errors = 0
        for line in lines:
            ok, msg = self.execute(line)
            if not ok:
                errors += 1
            if msg:
                out.write(("" if ok else "ERROR: ") + msg + "\n")
            if self.finished:
                break
        return errors

    # -------------------------
    # コマンド
    # -------------------------
    def do_new(self, args: List[str]) -> Tuple[bool, str]:
        if args:
            return False, "new は引数を取りません"
        sq.destroy(self.queue)
        self.queue = sq.create()
        if self.queue is None:
            return False, "Queue を確保できませんでした"
        return True, self._show()

    def do_free(self, args: List[str]) -> Tuple[bool, str]:
        if args:
            return False, "free は引数を取りません"
        sq.destroy(self.queue)
        self.queue = None
        return True, self._show()

    def do_insert_head(self, args: List[str]) -> Tuple[bool, str]:
        return self._insert(args, sq.insert_head, "ih")

    def do_insert_tail(self, args: List[str]) -> Tuple[bool, str]:
        return self._insert(args, sq.insert_tail, "it")

    def do_remove_head(self, args: List[str]) -> Tuple[bool, str]:
        if len(args) > 1:
            return False, "rh [STR]"
        if self.queue is None:
            return False, "NULL の Queue から取り出そうとしました"

        buf = bytearray(self.buffer_size)
        if not sq.remove_head(self.queue, buf, self.buffer_size):
            return False, "空の Queue から取り出そうとしました"

        removed = sq.buffer_text(buf)
        if args and removed != args[0]:
            return False, f"取り出した値 '{removed}' が期待値 '{args[0]}' と一致しません"
        return True, f"Removed {removed} from queue\n{self._show()}"

    def do_remove_head_quiet(self, args: List[str]) -> Tuple[bool, str]:
        if args:
            return False, "rhq は引数を取りません"
        if not sq.remove_head(self.queue):
            return False, "取り出しに失敗しました（NULL または空の Queue）"
        return True, self._show()

    def do_size(self, args: List[str]) -> Tuple[bool, str]:
        if len(args) > 1:
            return False, "size [N]"
        n = sq.size(self.queue)
        if args:
            expected = _parse_count(args[0])
            if expected is None:
                return False, f"不正な数値: {args[0]}"
            if expected != n:
                return False, f"要素数 {n} が期待値 {expected} と一致しません"
        return True, f"Queue size = {n}"

    def do_reverse(self, args: List[str]) -> Tuple[bool, str]:
        if args:
            return False, "reverse は引数を取りません"
        if self.queue is None:
            return True, "Warning: NULL の Queue に reverse を呼びました"
        sq.reverse(self.queue)
        return True, self._show()

    def do_sort(self, args: List[str]) -> Tuple[bool, str]:
        if args:
            return False, "sort は引数を取りません"
        if self.queue is None:
            return True, "Warning: NULL の Queue に sort を呼びました"
        sq.sort(self.queue)

        prev: Optional[str] = None
        first = True
        for value in self.queue:
            if not first and sq.sort_key(prev) > sq.sort_key(value):
                return False, "ソート結果が昇順になっていません"
            prev, first = value, False
        return True, self._show()

    def do_show(self, args: List[str]) -> Tuple[bool, str]:
        if args:
            return False, "show は引数を取りません"
        return True, self._show()

    def do_help(self, args: List[str]) -> Tuple[bool, str]:
        return True, HELP_TEXT

    def do_quit(self, args: List[str]) -> Tuple[bool, str]:
        sq.destroy(self.queue)
        self.queue = None
        self.finished = True
        return True, ""

    # -------------------------
    # 内部
    # -------------------------
    def _insert(self, args: List[str], op, name: str) -> Tuple[bool, str]:
        if not 1 <= len(args) <= 2:
            return False, f"{name} STR [N]"
        count = 1
        if len(args) == 2:
            parsed = _parse_count(args[1])
            if parsed is None:
                return False, f"不正な数値: {args[1]}"
            count = parsed
        if self.queue is None:
            return False, f"NULL の Queue に {name} を呼びました"

        value = _parse_value(args[0])
        for _ in range(count):
            if not op(self.queue, value):
                return False, "要素を確保できませんでした"
        return True, self._show()

    def _show(self) -> str:
        if self.queue is None:
            return "q = NULL"
        shown: List[str] = []
        for i, value in enumerate(self.queue):
            if i >= self.show_limit:
                shown.append("...")
                break
            shown.append(NULL_TOKEN if value is None else value)
        return "q = [" + " ".join(shown) + "]"


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="文字列 Queue のコマンドコンソール")
    parser.add_argument(
        "-f", "--file",
        type=argparse.FileType("r", encoding="utf-8"),
        default=None,
        help="コマンドを読むファイル（省略時は標準入力）",
    )
    parser.add_argument("-v", "--log-level", help="ログレベル（config を上書き）")
    args = parser.parse_args(argv)

    cfg = load_config()
    if args.log_level:
        cfg["log_level"] = args.log_level
    setup_logging(cfg)

    console = QueueConsole(
        buffer_size=int(cfg["string_buffer_size"]),
        show_limit=int(cfg["show_limit"]),
    )
    console.execute("new")

    if args.file is not None:
        with args.file as f:
            errors = console.run(f)
    else:
        errors = console.run(sys.stdin)

    sq.destroy(console.queue)
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
