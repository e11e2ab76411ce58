"""
Project scaffolding: writes a new function project from built-in templates.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Dict

from config import MANIFEST_FILENAME, PAYLOAD_FILENAME, SOURCE_DIRNAME
from models import ProjectAnswers

logger = logging.getLogger(__name__)

PROJECT_JSON = """{
  "name": "%name%",
  "version": "%version%",
  "description": "%description%",
  "author": "%author_name% <%author_email%>",
  "repository": {
    "type": "%repoType%",
    "url": "%repoUrl%"
  },
  "license": "%license%"
}
"""

MANIFEST_JSON = """{
  "name": "",
  "description": "",
  "author": "%author_name% <%author_email%>"
}
"""

README_MD = """# %name%

## Usage

    lambda-scaffold configure      # set function name, role, region...
    lambda-scaffold create         # package src/ and create the function
    lambda-scaffold update         # push configuration and code
    lambda-scaffold invoke         # run remotely with test-payload.json
    lambda-scaffold invoke-local   # run src/ in-process with test-payload.json
    lambda-scaffold logs           # tail the function logs
    lambda-scaffold delete         # delete the remote function
"""

INDEX_PY = '''import json


def handler(event, context):
    return {
        "statusCode": 200,
        "body": json.dumps({"message": "Hello from Lambda!", "input": event}),
    }
'''

TEST_PAYLOAD_JSON = """{
  "key1": "value1",
  "key2": "value2"
}
"""

GITIGNORE = """__pycache__/
*.py[cod]
.venv/
*.zip
.DS_Store
"""

EDITORCONFIG = """root = true

[*]
charset = utf-8
end_of_line = lf
indent_style = space
indent_size = 4
insert_final_newline = true
trim_trailing_whitespace = true

[*.{json,md}]
indent_size = 2
"""

# relative path -> template text
TEMPLATES: Dict[str, str] = {
    "project.json": PROJECT_JSON,
    "README.md": README_MD,
    ".gitignore": GITIGNORE,
    ".editorconfig": EDITORCONFIG,
    PAYLOAD_FILENAME: TEST_PAYLOAD_JSON,
    f"{SOURCE_DIRNAME}/index.py": INDEX_PY,
    f"{SOURCE_DIRNAME}/{MANIFEST_FILENAME}": MANIFEST_JSON,
}


def render(template: str, tokens: Dict[str, str], json_escape: bool = False) -> str:
    """
    Replace every %token% in template.

    Args:
        template: Template text
        tokens: Mapping of token to replacement value
        json_escape: Escape values for use inside JSON string literals

    Returns:
        Rendered text
    """
    for token, value in tokens.items():
        value = value or ""
        if json_escape:
            value = json.dumps(value)[1:-1]
        template = template.replace(token, value)
    return template


def create_project(answers: ProjectAnswers, parent_dir: Path) -> Path:
    """
    Write a new project folder named after the project.

    Args:
        answers: Collected scaffold answers
        parent_dir: Directory the project folder is created in

    Returns:
        Path to the new project folder

    Raises:
        ConfigValidationError: If the project name is not a plain folder name
        FileExistsError: If the project folder already exists
    """
    answers.validate()
    project_dir = Path(parent_dir) / answers.name
    project_dir.mkdir()
    (project_dir / SOURCE_DIRNAME).mkdir()

    tokens = answers.tokens()
    for rel_path, template in TEMPLATES.items():
        target = project_dir / rel_path
        content = render(template, tokens, json_escape=rel_path.endswith(".json"))
        target.write_text(content, encoding="utf-8")
        logger.debug(f"Wrote {target}")

    logger.info(f"Project {answers.name} created in {project_dir}")
    return project_dir


def remove_project(project_dir: Path) -> None:
    """Delete an existing project folder before scaffolding over it."""
    logger.info(f"Removing {project_dir}")
    shutil.rmtree(project_dir)
