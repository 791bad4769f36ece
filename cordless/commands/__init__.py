"""The command interface, the command line parser and the user commands."""