"""Shared test factories for ingestion and API tests.

Builds Synchronet syslog lines, log files and an ``xtrn.ini`` with sensible
defaults and easy overrides.
"""

import gzip
from pathlib import Path

from doorstats.config import Settings


# ─── Syslog Line Factory ──────────────────────────────────────────

def make_log_line(
    game_name="Trade Wars 2002",
    timestamp="2024-03-05T21:14:09.482113-05:00",
    node=3,
    user="Zaphod",
):
    """Build one launch line as written by Synchronet to syslog."""
    return (
        f"{timestamp} bbs synchronet: term Node {node} <{user}> "
        f"running external program: {game_name}"
    )


def make_noise_line(timestamp="2024-03-05T21:14:10.000001-05:00"):
    return f"{timestamp} bbs synchronet: term Node 3 <Zaphod> logged on"


def write_log(directory, name, lines):
    """Write lines to ``directory/name``, gzipped when the name ends in .gz."""
    path = Path(directory) / name
    text = "".join(f"{line}\n" for line in lines)
    if name.endswith(".gz"):
        with gzip.open(path, "wt", encoding="utf-8") as handle:
            handle.write(text)
    else:
        path.write_text(text, encoding="utf-8")
    return path


# ─── xtrn.ini ─────────────────────────────────────────────────────

XTRN_INI = """\
[sec:GAMES]
name=Games
ars=

[sec:CASINO]
name=Casino

[sec:ZZZ_SysOp]
name=ZZZ_SysOp

[prog:GAMES:TW2002]
cmd=tw2002.exe
name=Trade Wars 2002
settings=0

[prog:GAMES:LORD]
name=Legend of the Red Dragon
cmd=lord.bat %n

[prog:CASINO:BLACKJ]
name=Blackjack

[prog:ZZZ_SysOp:SCFG]
name=Synchronet Config
cmd=scfg
"""


def make_settings(log_dir, xtrn_config, **overrides):
    values = {
        "log_dir": str(log_dir),
        "xtrn_config": str(xtrn_config),
    }
    values.update(overrides)
    return Settings(**values)
