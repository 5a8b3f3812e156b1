"""tmux status-bar segments and the command-line interface."""
