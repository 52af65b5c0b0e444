from flask import Flask, render_template, request, redirect, url_for, flash

import string_queue as sq
from config import load_config
from logging_setup import setup_logging
from queue_console import NULL_TOKEN

cfg = load_config()

app = Flask(__name__)
app.secret_key = cfg["secret_key"]

# -------------------------
# Queue（簡易：メモリ）
# ※ サーバー再起動で消える
# -------------------------
queue_store = sq.create()


def _display(value):
    if value is None:
        return NULL_TOKEN
    # 孤立サロゲートはレスポンスにできないので置換して表示
    return value.encode("utf-8", errors="replace").decode("utf-8")


def _form_value():
    if request.form.get("absent"):
        return None
    return request.form.get("value") or ""


# -------------------------
# ルート
# -------------------------
@app.route("/", methods=["GET"])
def root():
    return redirect(url_for("queue_view"))


@app.route("/queue", methods=["GET"])
def queue_view():
    items = [_display(v) for v in queue_store] if queue_store is not None else []
    return render_template(
        "queue.html",
        items=items,
        size=sq.size(queue_store),
    )


# -------------------------
# 挿入
# -------------------------
@app.route("/queue/insert_head", methods=["POST"])
def queue_insert_head():
    value = _form_value()
    if sq.insert_head(queue_store, value):
        flash(f"已加入佇列前端：{_display(value)}", "success")
    else:
        flash("加入失敗", "error")
    return redirect(url_for("queue_view"))


@app.route("/queue/insert_tail", methods=["POST"])
def queue_insert_tail():
    value = _form_value()
    if sq.insert_tail(queue_store, value):
        flash(f"已加入佇列尾端：{_display(value)}", "success")
    else:
        flash("加入失敗", "error")
    return redirect(url_for("queue_view"))


# -------------------------
# 取り出し・並べ替え
# -------------------------
@app.route("/queue/remove_head", methods=["POST"])
def queue_remove_head():
    bufsize = int(cfg["string_buffer_size"])
    buf = bytearray(bufsize)
    if sq.remove_head(queue_store, buf, bufsize):
        flash(f"已取出：{sq.buffer_text(buf)}", "success")
    else:
        flash("佇列為空，無法取出", "error")
    return redirect(url_for("queue_view"))


@app.route("/queue/reverse", methods=["POST"])
def queue_reverse():
    sq.reverse(queue_store)
    flash("已反轉佇列", "success")
    return redirect(url_for("queue_view"))


@app.route("/queue/sort", methods=["POST"])
def queue_sort():
    sq.sort(queue_store)
    flash("已排序佇列", "success")
    return redirect(url_for("queue_view"))


@app.route("/queue/reset", methods=["POST"])
def queue_reset():
    global queue_store
    sq.destroy(queue_store)
    queue_store = sq.create()
    flash("已清空佇列", "success")
    return redirect(url_for("queue_view"))


if __name__ == "__main__":
    setup_logging(cfg)
    app.run(debug=True)
