# cordless

The building blocks of a terminal chat client: parsing of typed commands,
persisted settings, colour themes, keyboard shortcuts, read markers, the
channel tree of a server and the user commands that act on a chat session.

## Modules

- `cordless.commands.base`: the abstract `Command` class (`name`, `aliases`,
  `execute(writer, parameters)`, `print_help(writer)`) and `parse_command`,
  which splits a command line into parameters, honouring double quotes and
  escaped quotes.
- `cordless.config`: the settings (`Config`, `Account`, `TimeFormat`,
  `OnTypeInListBehaviour`) with `get_config`, `load_config`,
  `persist_config`, `get_config_directory`, `get_config_file` and
  `get_script_directory`.
- `cordless.theme`: `Color`, `new_rgb_color`, `color_from_hex`,
  `color_to_hex`, `Theme`, `default_theme`, `alternative_theme`,
  `theme_from_dict`, `get_theme`, `get_theme_file`, `load_theme`, and
  `escape`, which makes square-bracket tags show literally.
- `cordless.times`: `time_to_string` and `time_to_local_string` format a time
  as `HH:MM:SS`, `HH:MM` or not at all, as configured.
- `cordless.maths`: `minimum` and `maximum`.
- `cordless.models`: dataclasses for users, roles, channels, guilds, members,
  relationships, presences and settings, and `State`, the local cache with
  lookups (`guild`, `channel`, `users`), additions (`add_guild`,
  `add_channel`, `add_role`, `add_member`) and `user_channel_permissions`.
  A failed lookup raises `StateCacheError`.
- `cordless.discordutil`: channel and user names, user colours, sorting of
  messages, private channels, guilds and roles, `is_blocked`,
  `has_read_messages_permission`, and `load_guilds`, which pages through any
  `GuildLoader` a hundred guilds at a time.
- `cordless.readstate`: `ReadMarkers` tracks the last read message per
  channel, tells whether channels and guilds are read or muted and
  acknowledges channels, directly (`update_read`) or after a delay that
  restarts on each call (`update_read_buffered`). `readstate.markers` is a
  shared instance.
- `cordless.keys`: `Key`, `ModMask`, `KeyEvent`, `events_equal` and
  `event_to_string`.
- `cordless.shortcuts`: `Scope`, `Shortcut`, the built-in scopes and
  shortcuts (`SCOPES`, `SHORTCUTS`), `shortcut_from_dict`,
  `get_shortcuts_path`, `load` and `persist`.
- `cordless.channeltree`: `ChannelTree` and `TreeNode`; the tree lists the
  visible channels of a guild with unread, mentioned, read and loaded
  markers, and `render_lines` returns its indented text.
- `cordless.syntax`: `TviewFormatter`, a Pygments formatter that writes
  colour tags from an eight-colour palette, `find_closest`,
  `style_to_markup` and `highlight_code`.
- `cordless.commands.file_send` (`file-send`), `cordless.commands.fixlayout`
  (`fixlayout`), `cordless.commands.friends` (`friends`),
  `cordless.commands.status` (`status`, `status-get`, `status-set`) and
  `cordless.commands.server` (`server`, `server-join`, `server-leave`).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Parsing a command line:

```python
from cordless.commands.base import parse_command

parse_command('command argument "argument2 is long"')
# ['command', 'argument', 'argument2 is long']

parse_command("   ")
# []
```

Reading and changing the configuration:

```python
from cordless.config import load_config, persist_config

config = load_config()
config.use_fixed_layout = True
persist_config()
```

The configuration lives in `config.json` inside the directory returned by
`get_config_directory()`: `$XDG_CONFIG_DIR` or `~/.config/cordless` on Linux,
`%APPDATA%\cordless` on Windows and `~/.cordless` on macOS; the directory is
created if it is missing. Themes are read from `theme.json` and shortcuts
from `shortcuts.json` in the same directory.

Rendering a key combination:

```python
from cordless.keys import Key, KeyEvent, ModMask, event_to_string

event_to_string(KeyEvent(Key.LEFT, 0, ModMask.CTRL | ModMask.SHIFT))
# 'Ctrl+Shift+Left'
```

Highlighting code for display:

```python
from cordless.syntax import highlight_code

markup = highlight_code("print('hi')", "python", "monokai")
```

Commands take a session object that provides the state and the calls they
need, and write their output to any text stream:

```python
import io

from cordless.commands.status import StatusGetCommand
from cordless.models import State


class Session:
    state = State()

    def user_update_status(self, status):
        return None


out = io.StringIO()
StatusGetCommand(Session()).execute(out, [])
out.getvalue()
# '[green]Online[white]\n'
```

## What the package does not do

There is no network client: logging in, the connection to the chat service
and the requests that commands make (sending files, accepting invites,
managing friends, updating the status) are left to the session objects you
pass in. There is no terminal screen or application to start; the channel
tree and the commands hold the data and logic, and drawing them is up to the
caller. There is no help-topic command and no scripting of outgoing messages.