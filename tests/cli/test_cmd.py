from rlist.cli.cmd import RootCommand
from rlist.config import GlobalConfig


def test_build_argparse(rlist_config: GlobalConfig) -> None:
    from rlist.cli import builtin_commands

    del builtin_commands

    p = RootCommand.build_argparse(rlist_config)

    args = p.parse_args(["rm", "a", "b"])
    assert args.key == ["a", "b"]
    assert not args.porcelain

    args = p.parse_args(["--porcelain", "ls", "--todo"])
    assert args.porcelain
    assert args.only_done is False

    args = p.parse_args(["list"])
    assert args.only_done is None

    args = p.parse_args(["config", "get", "reading_list.file"])
    assert args.key == "reading_list.file"
