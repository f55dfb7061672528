"""Shared help text for the init command."""

INIT_COMMAND_DOC = """
Generate a new project from the template repository.

Interactive Mode (default):
- Prompts for platform, destination, project name and author
- Shows a summary and asks for confirmation

Non-Interactive Mode (--non-interactive):
- Skips all prompts
- Uses provided options or defaults (platform from config, current
  directory, destination folder name, git config user.name)

What Happens:
- The template repository is cloned into a temporary folder
- The platform folder (iOSTemplate, macOSTemplate, ...) is copied into the
  destination; an existing README.md or LICENSE is kept
- {PROJECT}, {AUTHOR}, {YEAR}, {TODAY}, {DATE}, {ORGANIZATION} and
  {BUNDLEID} are filled in across file names and contents
- The bootstrap command (carthage update) runs unless --no-bootstrap

Examples:
  plate init                                    # Interactive mode
  plate init ~/Code/MyApp --project MyApp --name "Jane Doe" --force
  plate init . --platform macOS --non-interactive --no-bootstrap
  plate init . --repo https://github.com/acme/templates.git --atomic
"""
