from rich.pretty import pprint

from vertin import *


@command(
    arguments={"files": Argument(str, count="all")},
    flags={"port": Flag(Number, alias="p", default=8080), "verbose": Flag(Boolean, alias="v")},
)
def serve(context):
    """serve the given files"""
    pprint(context)


if __name__ == '__main__':
    pprint(serve)
    invoke(serve)
