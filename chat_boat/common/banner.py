"""
Startup banners for the client and server.
"""

import sys
from typing import Optional, TextIO

_GRAPHIC = r"""  .oooooo.   oooo                      .
 d8P'  `Y8b  `888                    .o8
888           888 .oo.    .oooo.   .o888oo
888           888P"Y88b  `P  )88b    888
888           888   888   .oP"888    888
`88b    ooo   888   888  d8(  888    888 .
 `Y8bood8P'  o888o o888o `Y888""8o   "888"

oooooooooo.                            .
`888'   `Y8b                         .o8
 888     888   .ooooo.    .oooo.   .o888oo
 888oooo888'  d88' `88b  `P  )88b    888
 888    `88b  888   888   .oP"888    888
 888    .88P  888   888  d8(  888    888 .
o888bood8P'   `Y8bod8P'  `Y888""8o   "888"

                     __/___
               _____/______|
       _______/_____\_______\_____
       \              < < <       |
     ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
"""

_SERVER_GRAPHIC = r"""
       _____
      / ___/___  ______   _____  _____
      \__ \/ _ \/ ___/ | / / _ \/ ___/
     ___/ /  __/ /   | |/ /  __/ /
    /____/\___/_/    |___/\___/_/
"""


def print_client_banner(out: Optional[TextIO] = None):
    if out is None:
        out = sys.stdout
    out.write(_GRAPHIC)
    out.write("\nWelcome to Chat Boat!\nUse `help` for a list of commands.\n\n")
    out.flush()


def print_server_banner(out: Optional[TextIO] = None):
    if out is None:
        out = sys.stdout
    out.write(_GRAPHIC)
    out.write(_SERVER_GRAPHIC)
    out.write("\nWelcome to Chat Boat Server!\n\n")
    out.flush()
