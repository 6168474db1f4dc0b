import io

from malhaetda.session import Session
from malhaetda.shell import Shell


def run_shell(script: str) -> str:
    out = io.StringIO()
    shell = Shell(Session(out=out, color=False), stdin=io.StringIO(script), stdout=out)
    shell.cmdloop(intro="")
    return out.getvalue()


def test_shell_stops_at_termination() -> None:
    output = run_shell("나는 그녀에게 말했다. 1 + 1\n\n나는 그녀를 떠났다.\n나는 그녀에게 말했다. 5\n")
    assert "나는 그녀에게 숫자를 말했다: 2\n" in output
    assert ": 5" not in output
    assert output.count(">> ") == 3


def test_shell_stops_at_end_of_input() -> None:
    output = run_shell('나는 그녀에게 말했다. "끝"\n')
    assert "나는 그녀에게 글을 말했다: 끝\n" in output
    assert output.endswith(">> \n")


def test_shell_keeps_going_after_faults() -> None:
    output = run_shell('2 $ 2\n(1\n"a" / 2\n나는 그녀에게 말했다. 3\n나는 그녀를 잊었다\n')
    assert "[Tokenizer error]" in output
    assert "Parser error" in output
    assert "Type fault" in output
    assert "나는 그녀에게 숫자를 말했다: 3\n" in output


def test_shell_help() -> None:
    output = run_shell("help\n나는 그녀를 잊었다\n")
    assert "Each line is one statement" in output


def test_shell_reads_positional_stdin() -> None:
    out = io.StringIO()
    shell = Shell(Session(out=out, color=False), "tab", io.StringIO("나는 그녀에게 말했다. 4\n"), out)
    shell.cmdloop(intro="")
    assert "나는 그녀에게 숫자를 말했다: 4\n" in out.getvalue()
