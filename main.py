from rich.pretty import pprint

from argdecode import *


@record
def callback(
        name=field("--name", "-n"),
        /,
        grades=field("--grade", "-g", type=list[int], default=[]),
        subjects=positionals(),
        *,
        excited=flag("--excited", "-e"),
):
    return {"name": name, "grades": grades, "subjects": subjects, "excited": excited}


if __name__ == '__main__':
    pprint(decode(callback, shell=True, fancy=True))
