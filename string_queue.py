from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple, Union

from models import Element

logger = logging.getLogger(__name__)

TextInput = Union[str, bytes, bytearray, None]


def _copy_value(value: TextInput) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        # バッファは呼び出し側のもの。ここで str にコピーする
        # 不正な UTF-8 は surrogateescape で保持し、取り出し時に元のバイトへ戻す
        return bytes(value).decode("utf-8", errors="surrogateescape")
    return str(value)


def _encode(value: Optional[str]) -> bytes:
    """どんな str でも失敗しない UTF-8 エンコード"""
    if value is None:
        return b""
    try:
        return value.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        # \udc80-\udcff 以外の孤立サロゲート
        return value.encode("utf-8", errors="surrogatepass")


def sort_key(value: Optional[str]) -> Tuple[int, bytes]:
    # None は "" を含むすべての文字列より前
    if value is None:
        return (0, b"")
    return (1, _encode(value))


def _merge_sort(head: Element) -> Element:
    """
    単方向リストのマージソート（昇順・安定）
    分割は slow/fast ポインタで中央を探す（ランダムアクセスなし）
    """
    if head.next is None:
        return head

    slow = head
    fast = head.next
    while fast is not None and fast.next is not None:
        slow = slow.next
        fast = fast.next.next

    right = slow.next
    slow.next = None

    left = _merge_sort(head)
    right = _merge_sort(right)

    dummy = Element(value=None)
    cur = dummy
    while left is not None and right is not None:
        # 等しいときは左側を先に（安定）
        if sort_key(left.value) <= sort_key(right.value):
            cur.next = left
            left = left.next
        else:
            cur.next = right
            right = right.next
        cur = cur.next

    cur.next = left if left is not None else right
    return dummy.next


class StringQueue:
    """
    単方向リンクで実装した文字列 Queue
    insert_head / insert_tail / remove_head: O(1)
    reverse: O(n)（ノードの付け替えのみ）
    sort   : O(n log n)（マージソート、補助配列なし）
    """

    def __init__(self) -> None:
        self._head: Optional[Element] = None
        self._tail: Optional[Element] = None
        self._size: int = 0

    # -------------------------
    # 挿入
    # -------------------------
    def insert_head(self, value: TextInput) -> bool:
        try:
            node = Element(value=_copy_value(value), next=self._head)
        except MemoryError:
            logger.warning("insert_head: could not allocate element")
            return False
        self._head = node
        if self._tail is None:
            self._tail = node
        self._size += 1
        return True

    def insert_tail(self, value: TextInput) -> bool:
        try:
            node = Element(value=_copy_value(value))
        except MemoryError:
            logger.warning("insert_tail: could not allocate element")
            return False
        if self._tail is None:
            self._head = node
            self._tail = node
        else:
            self._tail.next = node
            self._tail = node
        self._size += 1
        return True

    # -------------------------
    # 削除
    # -------------------------
    def remove_head(self, sp: Optional[bytearray] = None, bufsize: int = 0) -> bool:
        """
        先頭を取り除く。sp があれば最大 bufsize-1 バイトをコピーし、
        残り（sp[bufsize-1] を含む）は NUL で埋める。bufsize == 0 なら書かない。
        """
        if bufsize < 0:
            raise ValueError("bufsize must be >= 0")
        if sp is not None and not isinstance(sp, bytearray):
            raise TypeError("sp must be a bytearray")
        if sp is not None and bufsize > len(sp):
            raise ValueError("bufsize exceeds buffer length")
        if self._head is None:
            return False

        # 先にコピー内容を作ってから取り外す
        data = _encode(self._head.value)[: max(bufsize - 1, 0)]
        self.pop()

        if sp is not None and bufsize > 0:
            sp[: len(data)] = data
            sp[len(data):bufsize] = bytes(bufsize - len(data))
        return True

    def pop(self) -> Tuple[bool, Optional[str]]:
        node = self._head
        if node is None:
            return False, None
        self._head = node.next
        node.next = None
        if self._head is None:
            self._tail = None
        self._size -= 1
        return True, node.value

    def clear(self) -> None:
        while self._head is not None:
            node = self._head
            self._head = node.next
            node.next = None
        self._tail = None
        self._size = 0

    # -------------------------
    # 並べ替え
    # -------------------------
    def reverse(self) -> None:
        if self._size < 2:
            return

        prev: Optional[Element] = None
        cur = self._head
        while cur is not None:
            nxt = cur.next
            cur.next = prev
            prev = cur
            cur = nxt

        self._head, self._tail = self._tail, self._head

    def sort(self) -> None:
        if self._size < 2:
            return

        self._head = _merge_sort(self._head)

        # tail はマージで追跡していないので末尾まで歩いて求め直す
        tail = self._tail
        while tail.next is not None:
            tail = tail.next
        self._tail = tail

    # -------------------------
    # 参照
    # -------------------------
    def peek(self) -> Optional[str]:
        return None if self._head is None else self._head.value

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Optional[str]]:
        node = self._head
        while node is not None:
            yield node.value
            node = node.next


# -------------------------
# 関数 API（q が None でも安全）
# -------------------------
def create() -> Optional[StringQueue]:
    try:
        return StringQueue()
    except MemoryError:
        logger.warning("create: could not allocate queue")
        return None


def destroy(q: Optional[StringQueue]) -> None:
    if q is None:
        return
    q.clear()


def insert_head(q: Optional[StringQueue], value: TextInput) -> bool:
    if q is None:
        return False
    return q.insert_head(value)


def insert_tail(q: Optional[StringQueue], value: TextInput) -> bool:
    if q is None:
        return False
    return q.insert_tail(value)


def remove_head(q: Optional[StringQueue], sp: Optional[bytearray] = None, bufsize: int = 0) -> bool:
    if q is None:
        return False
    return q.remove_head(sp, bufsize)


def size(q: Optional[StringQueue]) -> int:
    if q is None:
        return 0
    return q.size()


def reverse(q: Optional[StringQueue]) -> None:
    if q is None:
        return
    q.reverse()


def sort(q: Optional[StringQueue]) -> None:
    if q is None:
        return
    q.sort()


def buffer_text(sp: Union[bytes, bytearray]) -> str:
    """NUL 終端までをデコードして返す"""
    end = sp.find(0)
    if end < 0:
        end = len(sp)
    return bytes(sp[:end]).decode("utf-8", errors="replace")
