# Task board system: markdown checklists parsed into tasks, arranged into boards
#
# Components:
#   schema.py      - Data model (TaskItem, day-ordinal helpers)
#   parser.py      - Markdown checklist parser (nested subtasks, tags, dates)
#   task_list.py   - TaskList collection with per-file replacement
#   columns.py     - Column type and shared sort orders
#   date_board.py  - Undated / Today / Tomorrow / Future / Completed columns
#   tag_board.py   - Tag-driven columns with Others / Untagged / Completed
#   selector.py    - BoundedSelector (sequence + validated selection)
#   boards.py      - Board configs, dispatch, BoardSet and cards
#   config.py      - YAML configuration loader
#   vault.py       - Loads a directory of notes into a TaskList
#   watcher.py     - Incremental re-parse on filesystem changes
#   cli.py         - Command line entry point
