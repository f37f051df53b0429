from token_vault.__main__ import main
from token_vault.core.hashing import generate_token


def test_cli_tokenize_and_detokenize(session_factory, capsys):
    assert main(["tokenize", "PHONE", "13800138000"], session_factory=session_factory) == 0
    token = capsys.readouterr().out.strip()
    assert token == generate_token("13800138000")

    assert main(["detokenize", "PHONE", token], session_factory=session_factory) == 0
    assert capsys.readouterr().out.strip() == "13800138000"


def test_cli_reports_errors_with_exit_code(session_factory, capsys):
    exit_code = main(["tokenize", "ID_NUMBER", "110105194912310021"], session_factory=session_factory)
    assert exit_code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[7001]" in captured.err

    assert main(["detokenize", "PHONE", "missing"], session_factory=session_factory) == 1
    assert "[7004]" in capsys.readouterr().err
