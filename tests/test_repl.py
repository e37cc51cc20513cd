import io

from calcvm.interpreter import Interpreter
from calcvm.repl import CONTINUATION_PROMPT, PROMPT, Repl


def scripted(lines, prompts=None):
    """input() stand-in replaying `lines`; exceptions in the list are raised."""
    feed = iter(lines)

    def read(prompt):
        if prompts is not None:
            prompts.append(prompt)
        try:
            line = next(feed)
        except StopIteration:
            raise EOFError
        if isinstance(line, BaseException):
            raise line
        return line

    return read


def make_repl(lines, prompts=None):
    out, err = io.StringIO(), io.StringIO()
    return Repl(input_fn=scripted(lines, prompts), out=out, err=err), out, err


def test_state_persists_between_entries():
    repl, out, err = make_repl(["var x = 2", "x * 21"])
    assert repl.loop() == 0
    assert out.getvalue() == "42\n\n"
    assert err.getvalue() == ""


def test_multi_line_group():
    prompts = []
    repl, out, _ = make_repl(["fun sq(n) {", "  return n * n", "}", "sq(7)"], prompts)
    repl.loop()
    assert out.getvalue().split() == ["49"]
    assert prompts[:4] == [PROMPT, CONTINUATION_PROMPT, CONTINUATION_PROMPT, PROMPT]


def test_errors_are_reported_and_session_continues():
    repl, out, err = make_repl(["1 / 0", "var y = 1", "y + 1"])
    assert repl.loop() == 0
    assert err.getvalue() == "Error: Division by zero\n"
    assert out.getvalue().split() == ["2"]


def test_output_statements_share_the_stream():
    repl, out, _ = make_repl(["! 5", "var z = 1"])
    repl.loop()
    assert out.getvalue() == "5\n\n"


def test_ctrl_c_discards_pending_group():
    repl, out, err = make_repl(["fun f() {", KeyboardInterrupt(), "1 + 1"])
    assert repl.loop() == 0
    assert out.getvalue().split() == ["2"]
    assert repl.buffer == []
    assert err.getvalue() == ""


def test_exit_command():
    repl, out, _ = make_repl(["exit", "! 1"])
    assert repl.loop() == 0
    assert out.getvalue() == ""


def test_feed_reports_when_it_ran():
    repl = Repl(Interpreter(out=io.StringIO()), out=io.StringIO(), err=io.StringIO())
    assert repl.feed("if 1 {") is False
    assert repl.feed("}") is True
    assert repl.feed("   ") is False


def test_session_survives_runaway_recursion():
    out, err = io.StringIO(), io.StringIO()
    repl = Repl(Interpreter(out=out, max_call_depth=50), out=out, err=err)
    repl.feed("fun down(n) { if n == 0 { return 0 } return down(n - 1) }")
    repl.feed("down(500)")
    repl.feed("! 7")
    assert "maximum call depth" in err.getvalue()
    assert out.getvalue() == "7\n"


def test_deep_recursion_echoes_result():
    repl, out, err = make_repl(
        ["fun down(n) { if n == 0 { return 0 } return down(n - 1) }", "down(500)"]
    )
    repl.loop()
    assert out.getvalue().split() == ["0"]
    assert err.getvalue() == ""
