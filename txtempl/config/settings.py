from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
import structlog

log = structlog.get_logger(__name__)

DEFAULT_PROFILE_NAME = "DEFAULT"
STDIN_TEMPLATE_PATH = "-"

@dataclass
class RenderConfig:
    # holds all configuration parameters for a single render run.
    template_path: Optional[Path] = None
    read_from_stdin: bool = False
    constants: Dict[str, str] = field(default_factory=dict)
    options: Dict[str, str] = field(default_factory=dict)
    keys: Dict[str, str] = field(default_factory=dict)
    output_file: Optional[Path] = None
    clipboard: bool = False
    base64_output: bool = False
    strict: bool = False
    quiet: bool = False
    save_profile_name: Optional[str] = None

    def __post_init__(self):
        # a template path of '-' means read the template from stdin.
        if self.template_path is not None and str(self.template_path) == STDIN_TEMPLATE_PATH:
            self.template_path = None
            self.read_from_stdin = True
        if self.template_path is None and not self.read_from_stdin:
            log.debug("no_template_path_given_defaulting_to_stdin")
            self.read_from_stdin = True
