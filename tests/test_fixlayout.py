import io

import pytest

from cordless.commands.fixlayout import FixLayoutCommand
from cordless.config import Config


class FakeWindow:
    def __init__(self):
        self.refreshed = 0

    def refresh_layout(self):
        self.refreshed += 1


class Recorder:
    def __init__(self, error=None):
        self.calls = 0
        self.error = error

    def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error


def make(error=None):
    window = FakeWindow()
    configuration = Config()
    persist = Recorder(error)
    return FixLayoutCommand(window, configuration, persist), window, configuration, persist


def run(command, parameters):
    out = io.StringIO()
    command.execute(out, parameters)
    return out.getvalue()


@pytest.mark.parametrize("word", ["true", "True", "1", "t"])
def test_enable(word):
    command, window, configuration, persist = make()
    assert run(command, [word]) == "FixLayout has been enabled\n"
    assert configuration.use_fixed_layout is True
    assert window.refreshed == 1
    assert persist.calls == 1


def test_disable():
    command, window, configuration, persist = make()
    configuration.use_fixed_layout = True
    assert run(command, ["false"]) == "FixLayout has been disabled\n"
    assert configuration.use_fixed_layout is False


def test_invalid_bool():
    command, window, configuration, persist = make()
    output = run(command, ["maybe"])
    assert output.startswith("The given input was incorrect")
    assert window.refreshed == 0
    assert persist.calls == 0


def test_set_left_and_right():
    command, window, configuration, persist = make()
    assert run(command, ["left", "20"]) == "The left side of the layout was set to 20\n"
    assert run(command, ["right", "7"]) == "The right side of the layout was set to 7\n"
    assert (configuration.fixed_size_left, configuration.fixed_size_right) == (20, 7)
    assert window.refreshed == 2


def test_negative_size():
    command, window, configuration, persist = make()
    output = run(command, ["right", "-1"])
    assert output == "The given input was out of bounds, it has to be bigger than -1\n"
    assert configuration.fixed_size_right == Config().fixed_size_right


def test_invalid_size():
    command, window, configuration, persist = make()
    output = run(command, ["left", "abc"])
    assert output == "The given input was invalid, it has to be an integral number greater than -1\n"


def test_unknown_subcommand():
    command, window, configuration, persist = make()
    assert run(command, ["up", "3"]) == "The subcommand 'up' does not exist\n"
    assert window.refreshed == 0


def test_persist_error():
    command, window, configuration, persist = make(OSError("disk full"))
    output = run(command, ["true"])
    assert output == "Error saving configuration: disk full\n"
    assert configuration.use_fixed_layout is True


def test_help_for_wrong_parameter_count():
    command, window, configuration, persist = make()
    output = run(command, [])
    assert output.startswith("[orange]# fixlayout[white]")
    assert output == run(command, ["a", "b", "c"])


def test_names():
    command, *_ = make()
    assert command.name == "fixlayout"
    assert command.aliases == ("fix-layout",)