import pytest

from ec2dev.utils import confirm_transition, log_and_print_error


@pytest.mark.parametrize("answer", ["", "y", "Y", "yes", "sure", "\n", "  "])
def test_confirm_defaults_to_yes(answer: str) -> None:
    assert confirm_transition("running", lambda prompt: answer) is True


@pytest.mark.parametrize("answer", ["n", "N", "no", "NO", " n\n"])
def test_confirm_explicit_no(answer: str) -> None:
    assert confirm_transition("running", lambda prompt: answer) is False


def test_confirm_prompt_text() -> None:
    prompts = []

    confirm_transition("stopped", lambda prompt: prompts.append(prompt) or "")

    assert prompts == ['Change the state to "stopped"?(Yn): ']


def test_confirm_end_of_input_proceeds() -> None:
    def closed_stdin(prompt: str) -> str:
        raise EOFError

    assert confirm_transition("running", closed_stdin) is True


def test_log_and_print_error(capsys) -> None:
    log_and_print_error("%s already exists", "config.yml")

    assert capsys.readouterr().err == "Error: config.yml already exists\n"
