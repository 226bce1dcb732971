# cqldoc Command Line Package
# ===========================
# JSON documentation output for CQL schema files.

from cqldoc.main import main
from cqldoc.renderer import Renderer
