"""Shared fixtures: a small games.log with three games.

Game 1 ends with ShutdownGame, game 2 is cut short by a new InitGame and
game 3 runs to end of input.
"""

import pytest

SAMPLE_LOG_LINES = [
    "  0:00 ------------------------------------------------------------",
    "  0:00 ClientConnect: 9",
    "  0:00 InitGame: \\sv_floodProtect\\1\\sv_maxPing\\0\\sv_hostname\\Code Miner Server\\g_gametype\\0",
    " 15:00 Exit: Timelimit hit.",
    " 20:34 ClientConnect: 2",
    " 20:34 ClientUserinfoChanged: 2 n\\Isgalamido\\t\\0\\model\\xian/default\\hmodel\\xian/default",
    " 20:37 ClientBegin: 2",
    " 20:37 ShutdownGame:",
    " 20:37 ------------------------------------------------------------",
    " 20:37 InitGame: \\sv_hostname\\Code Miner Server\\g_gametype\\0",
    " 20:38 ClientConnect: 2",
    " 20:38 ClientUserinfoChanged: 2 n\\Isgalamido\\t\\0\\model\\uriel/zael",
    " 20:38 ClientBegin: 2",
    " 20:40 Item: 2 weapon_rocketlauncher",
    " 20:54 Kill: 1022 2 22: <world> killed Isgalamido by MOD_TRIGGER_HURT",
    " 21:07 ClientConnect: 3",
    " 21:07 ClientUserinfoChanged: 3 n\\Dono da Bola\\t\\0\\model\\sarge",
    " 21:10 ClientDisconnect: 3",
    " 21:15 ClientConnect: 4",
    " 21:15 ClientUserinfoChanged: 4 n\\Zeh\\t\\0\\model\\sarge/default",
    " 22:06 Kill: 2 3 7: Isgalamido killed Mocinha by MOD_ROCKET_SPLASH",
    " 22:18 Kill: 2 2 7: Isgalamido killed Isgalamido by MOD_ROCKET_SPLASH",
    " 22:40 Kill: 4 2 6: Zeh killed Isgalamido by MOD_RAILGUN",
    " 22:41 InitGame: \\sv_hostname\\Restarted",
    " 22:42 ClientConnect: 5",
    " 22:43 Kill: 5 5 2: Assasinu Credi killed Zeh by MOD_SHOTGUN",
    " 22:44 Kill: 1022 5 22: <world> killed Assasinu Credi by MOD_FALLING",
    "some garbage line",
]


@pytest.fixture
def sample_log_lines():
    """Lines of the three-game sample log."""
    return list(SAMPLE_LOG_LINES)


@pytest.fixture
def sample_log_file(tmp_path):
    """The sample log written to disk."""
    log_file = tmp_path / "games.log"
    log_file.write_text("\n".join(SAMPLE_LOG_LINES) + "\n", encoding="utf-8")
    return log_file


@pytest.fixture
def parsed_sample(sample_log_lines):
    """A LogParser that has consumed the sample log."""
    from quakelog.core.parser import LogParser

    parser = LogParser()
    parser.parse_lines(sample_log_lines)
    return parser


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo setup_logging() calls made by a test."""
    import logging

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
