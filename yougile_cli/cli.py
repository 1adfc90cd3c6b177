"""
YouGile CLI - Command-line interface.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- Config file resolution and loading
- Tables and indented JSON for human output
- Raw JSON output (--json) for piping/automation
"""

import argparse
import json
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from yougile_cli import __version__
from yougile_cli.auth import login
from yougile_cli.config import (
    DEFAULT_BASE_URL,
    Config,
    ConfigError,
    load_config,
    resolve_config_path,
    save_config,
)
from yougile_cli.core.client import CLIError, ValidationError
from yougile_cli.core.types import PaginatedResponse
from yougile_cli.sdk import StickerOperations, YouGileClient

logger = logging.getLogger(__name__)

API_KEY_MASK = "***"
DEFAULT_LIMIT = 50

# =============================================================================
# Output Helpers
# =============================================================================


def json_output(data: Any, pretty: bool = False, file: TextIO | None = None) -> None:
    """Print JSON output: one line, or indented when pretty."""
    print(json.dumps(data, indent=2 if pretty else None, ensure_ascii=False, default=str), file=file)


def error_output(error: CLIError, as_json: bool = False) -> None:
    """Print error and exit."""
    if as_json:
        json_output(error.to_dict())
    else:
        print(f"Error: {error.message}", file=sys.stderr)
    sys.exit(1)


def table_output(headers: list[str], rows: list[list[str]], file: TextIO | None = None) -> None:
    """Print a space-padded table sized to the widest header or cell of each column."""
    if not headers:
        return
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(str(cell)))

    def line(cells: list[Any]) -> str:
        return "  ".join(str(c).ljust(w) for c, w in zip(cells, widths)).rstrip()

    print(line(headers), file=file)
    print("-" * (sum(widths) + 2 * (len(widths) - 1)), file=file)
    for row in rows:
        print(line(row), file=file)


def yes_no(value: bool) -> str:
    return "yes" if value else "no"


# =============================================================================
# Context
# =============================================================================


@dataclass
class Context:
    """Per-invocation state shared by all commands: where the config lives and how to print."""

    config_flag: str | None = None
    output_json: bool = False

    def config_path(self) -> Path:
        return resolve_config_path(self.config_flag)

    def load_config(self) -> Config:
        try:
            return load_config(self.config_path())
        except ConfigError as e:
            raise prefixed("load config", e)

    def client(self) -> YouGileClient:
        """Load config and build an authenticated client."""
        cfg = self.load_config()
        if not cfg.api_key:
            raise ValidationError("api_key not set in config; run 'yougile auth login' first")
        return YouGileClient(cfg.base_url, cfg.api_key)

    def auth_base_url(self, override: str | None) -> str:
        """Base URL for credential-based calls: --base-url, else the config file's, else production."""
        if override:
            return override.rstrip("/")
        path = self.config_path()
        if not path.exists():
            return DEFAULT_BASE_URL
        try:
            return load_config(path).base_url
        except ConfigError as e:
            logger.warning("ignoring unreadable config %s (%s); using %s", path, e.message, DEFAULT_BASE_URL)
            return DEFAULT_BASE_URL

    def render_list(
        self,
        page: PaginatedResponse[Any],
        headers: list[str],
        row: Callable[[Any], list[str]],
    ) -> None:
        if self.output_json:
            json_output(page.raw)
        else:
            table_output(headers, [row(item) for item in page.data])
            if page.has_more:
                print(f"more results available; pass --offset {page.offset + len(page.data)}", file=sys.stderr)

    def render_item(self, data: Any) -> None:
        json_output(data, pretty=not self.output_json)


def prefixed(prefix: str, error: CLIError) -> CLIError:
    """Prefix an error message in place, e.g. ``login: get companies: HTTP 401 Unauthorized``."""
    error.message = f"{prefix}: {error.message}"
    error.args = (error.message,)
    return error


def require(args: argparse.Namespace, *names: str) -> None:
    """Reject blank required flags before any network call."""
    if all((getattr(args, n, None) or "").strip() for n in names):
        return
    labels = [n.replace("_", "-") for n in names]
    what = labels[0] if len(labels) == 1 else ", ".join(labels[:-1]) + " and " + labels[-1]
    flags = ", ".join("--" + label for label in labels)
    raise ValidationError(f"{what} required ({flags})")


# =============================================================================
# Config Commands
# =============================================================================


def cmd_config_path(ctx: Context, _args: argparse.Namespace) -> None:
    """Print path to config file."""
    print(ctx.config_path())


def cmd_config_show(ctx: Context, _args: argparse.Namespace) -> None:
    """Show current config; the API key is masked in human output."""
    cfg = ctx.load_config()
    if ctx.output_json:
        json_output(cfg.to_dict())
    else:
        json_output({"base_url": cfg.base_url, "api_key": API_KEY_MASK}, pretty=True)


# =============================================================================
# Auth Commands
# =============================================================================


def cmd_auth_login(ctx: Context, args: argparse.Namespace) -> None:
    """Log in with email and password and save the API key to config."""
    require(args, "email", "password")
    path = ctx.config_path()
    base_url = ctx.auth_base_url(args.base_url)

    try:
        key = login(base_url, args.email, args.password, company_id=args.company_id)
    except CLIError as e:
        raise prefixed("login", e)

    try:
        save_config(path, Config(base_url=base_url, api_key=key))
    except ConfigError as e:
        raise prefixed("save config", e)

    print(f"API key saved to {path}")


def cmd_auth_companies(ctx: Context, args: argparse.Namespace) -> None:
    """List companies the account belongs to."""
    require(args, "email", "password")
    client = YouGileClient(ctx.auth_base_url(args.base_url))
    page = client.auth.companies(args.email, args.password, limit=args.limit, offset=args.offset)
    ctx.render_list(page, ["ID", "Name", "Admin"], lambda c: [c.id, c.name, yes_no(c.is_admin)])


def cmd_auth_keys_list(ctx: Context, args: argparse.Namespace) -> None:
    """List API keys."""
    require(args, "email", "password")
    client = YouGileClient(ctx.auth_base_url(args.base_url))
    keys = client.auth.list_keys(args.email, args.password, company_id=args.company_id)
    if ctx.output_json:
        json_output([k.raw for k in keys])
        return
    table_output(["Key", "CompanyId", "Deleted"], [[k.key, k.company_id, yes_no(k.deleted)] for k in keys])


def cmd_auth_keys_create(ctx: Context, args: argparse.Namespace) -> None:
    """Create an API key for a company."""
    require(args, "email", "password", "company_id")
    client = YouGileClient(ctx.auth_base_url(args.base_url))
    key = client.auth.create_key(args.email, args.password, args.company_id)
    if ctx.output_json:
        json_output(key.raw)
    else:
        print(f"API key created: {key.key}")


def cmd_auth_keys_delete(ctx: Context, args: argparse.Namespace) -> None:
    """Delete an API key."""
    client = YouGileClient(ctx.auth_base_url(args.base_url))
    client.auth.delete_key(args.key)
    print("API key deleted")


# =============================================================================
# Company / Users / Departments Commands
# =============================================================================


def cmd_company_get(ctx: Context, _args: argparse.Namespace) -> None:
    """Get current company details."""
    ctx.render_item(ctx.client().company.get())


def cmd_users_list(ctx: Context, args: argparse.Namespace) -> None:
    """List users."""
    page = ctx.client().users.list(
        limit=args.limit,
        offset=args.offset,
        email=args.email,
        project_id=args.project_id,
    )
    ctx.render_list(page, ["ID", "Email", "Admin"], lambda u: [u.id, u.email, yes_no(u.is_admin)])


def cmd_users_get(ctx: Context, args: argparse.Namespace) -> None:
    """Get a user by ID."""
    ctx.render_item(ctx.client().users.get(args.id).raw)


def cmd_departments_list(ctx: Context, args: argparse.Namespace) -> None:
    """List departments."""
    page = ctx.client().departments.list(
        limit=args.limit,
        offset=args.offset,
        title=args.title,
        parent_id=args.parent_id,
    )
    ctx.render_list(page, ["ID", "Title", "ParentId"], lambda d: [d.id, d.title, d.parent_id or ""])


def cmd_departments_get(ctx: Context, args: argparse.Namespace) -> None:
    """Get a department by ID."""
    ctx.render_item(ctx.client().departments.get(args.id).raw)


# =============================================================================
# Projects / Boards / Columns Commands
# =============================================================================


def cmd_projects_list(ctx: Context, args: argparse.Namespace) -> None:
    """List projects."""
    page = ctx.client().projects.list(limit=args.limit, offset=args.offset, title=args.title)
    ctx.render_list(page, ["ID", "Title"], lambda p: [p.id, p.title])


def cmd_projects_get(ctx: Context, args: argparse.Namespace) -> None:
    """Get a project by ID."""
    ctx.render_item(ctx.client().projects.get(args.id).raw)


def cmd_boards_list(ctx: Context, args: argparse.Namespace) -> None:
    """List boards."""
    page = ctx.client().boards.list(
        limit=args.limit,
        offset=args.offset,
        title=args.title,
        project_id=args.project_id,
    )
    ctx.render_list(page, ["ID", "Title", "ProjectId"], lambda b: [b.id, b.title, b.project_id])


def cmd_boards_get(ctx: Context, args: argparse.Namespace) -> None:
    """Get a board by ID."""
    ctx.render_item(ctx.client().boards.get(args.id).raw)


def cmd_columns_list(ctx: Context, args: argparse.Namespace) -> None:
    """List columns."""
    page = ctx.client().columns.list(
        limit=args.limit,
        offset=args.offset,
        title=args.title,
        board_id=args.board_id,
    )
    ctx.render_list(page, ["ID", "Title", "BoardId"], lambda c: [c.id, c.title, c.board_id])


def cmd_columns_get(ctx: Context, args: argparse.Namespace) -> None:
    """Get a column by ID."""
    ctx.render_item(ctx.client().columns.get(args.id).raw)


# =============================================================================
# Task Commands
# =============================================================================


def cmd_tasks_list(ctx: Context, args: argparse.Namespace) -> None:
    """List tasks."""
    page = ctx.client().tasks.list(
        limit=args.limit,
        offset=args.offset,
        title=args.title,
        column_id=args.column_id,
    )
    ctx.render_list(page, ["ID", "Title", "ColumnId"], lambda t: [t.id, t.title, t.column_id or ""])


def cmd_tasks_get(ctx: Context, args: argparse.Namespace) -> None:
    """Get a task by ID."""
    ctx.render_item(ctx.client().tasks.get(args.id).raw)


def cmd_tasks_create(ctx: Context, args: argparse.Namespace) -> None:
    """Create a task."""
    require(args, "title")
    result = ctx.client().tasks.create(args.title, column_id=args.column_id)
    if ctx.output_json:
        json_output(result)
    else:
        print(f"Task created: id={result['id']}")


def cmd_tasks_update(ctx: Context, args: argparse.Namespace) -> None:
    """Update a task's title or move it to another column."""
    result = ctx.client().tasks.update(args.id, title=args.title, column_id=args.column_id)
    if ctx.output_json and result is not None:
        json_output(result)
    else:
        print(f"Task updated: id={args.id}")


def cmd_tasks_subscribers_get(ctx: Context, args: argparse.Namespace) -> None:
    """Print the user IDs subscribed to a task chat, one per line."""
    user_ids = ctx.client().tasks.chat_subscribers(args.task_id)
    if ctx.output_json:
        json_output(user_ids)
        return
    for user_id in user_ids:
        print(user_id)


def cmd_tasks_subscribers_update(ctx: Context, args: argparse.Namespace) -> None:
    """Replace the task chat subscribers."""
    user_ids = [u.strip() for u in (args.user_ids or "").split(",") if u.strip()]
    if not user_ids:
        raise ValidationError("user-ids is required (--user-ids id1,id2,...)")
    ctx.client().tasks.set_chat_subscribers(args.task_id, user_ids)
    print(f"Chat subscribers updated for task {args.task_id}")


# =============================================================================
# Webhooks / Files Commands
# =============================================================================


def cmd_webhooks_list(ctx: Context, args: argparse.Namespace) -> None:
    """List webhooks."""
    result = ctx.client().webhooks.list(include_deleted=args.include_deleted)
    if not ctx.output_json and result is None:
        print("{}")
        return
    ctx.render_item(result)


def cmd_files_upload(ctx: Context, args: argparse.Namespace) -> None:
    """Upload a file and print its URL."""
    path = Path(args.file)
    if not path.is_file():
        raise ValidationError(f"open file: {path}: no such file")
    uploaded = ctx.client().files.upload(path)
    if ctx.output_json:
        json_output(uploaded.raw)
    else:
        print(f"URL: {uploaded.full_url}")


# =============================================================================
# Chat Commands
# =============================================================================


def cmd_chats_list(ctx: Context, args: argparse.Namespace) -> None:
    """List group chats."""
    page = ctx.client().chats.list(limit=args.limit, offset=args.offset, title=args.title)
    ctx.render_list(page, ["ID", "Title"], lambda c: [c.id, c.title])


def cmd_chats_get(ctx: Context, args: argparse.Namespace) -> None:
    """Get a group chat by ID."""
    ctx.render_item(ctx.client().chats.get(args.id).raw)


def cmd_chats_messages_list(ctx: Context, args: argparse.Namespace) -> None:
    """List messages in a chat."""
    page = ctx.client().chats.messages(args.chat_id, limit=args.limit, offset=args.offset)
    ctx.render_list(page, ["Id", "FromUserId", "Text"], lambda m: [str(m.id), m.from_user_id, m.text])


def cmd_chats_messages_send(ctx: Context, args: argparse.Namespace) -> None:
    """Send a message to a chat."""
    require(args, "text")
    result = ctx.client().chats.send(args.chat_id, args.text)
    if ctx.output_json:
        json_output(result)
    elif isinstance(result, dict):
        print(f"Message id: {result.get('id')}")


# =============================================================================
# Sticker Commands (string and sprint share one shape)
# =============================================================================


def _stickers(ctx: Context, args: argparse.Namespace) -> StickerOperations:
    return getattr(ctx.client(), args.sticker_kind)


def cmd_stickers_list(ctx: Context, args: argparse.Namespace) -> None:
    """List stickers."""
    page = _stickers(ctx, args).list(include_deleted=args.include_deleted)
    ctx.render_list(page, ["ID", "Name"], lambda s: [s.id, s.name])


def cmd_stickers_get(ctx: Context, args: argparse.Namespace) -> None:
    """Get a sticker by ID."""
    ctx.render_item(_stickers(ctx, args).get(args.id).raw)


def cmd_stickers_create(ctx: Context, args: argparse.Namespace) -> None:
    """Create a sticker."""
    require(args, "name")
    ops = _stickers(ctx, args)
    result = ops.create(args.name)
    if ctx.output_json:
        json_output(result)
    else:
        print(f"{ops.kind.capitalize()} created: id={result['id']}")


def cmd_stickers_update(ctx: Context, args: argparse.Namespace) -> None:
    """Rename a sticker."""
    ops = _stickers(ctx, args)
    result = ops.update(args.id, name=args.name)
    if ctx.output_json and result is not None:
        json_output(result)
    else:
        print(f"{ops.kind.capitalize()} updated: id={args.id}")


def cmd_stickers_states_list(ctx: Context, args: argparse.Namespace) -> None:
    """List the states of a sticker."""
    sticker = _stickers(ctx, args).get(args.sticker_id)
    if ctx.output_json:
        json_output([s.raw for s in sticker.states])
        return
    table_output(["ID", "Name"], [[s.id, s.name] for s in sticker.states])


def cmd_stickers_states_get(ctx: Context, args: argparse.Namespace) -> None:
    """Get one sticker state."""
    ctx.render_item(_stickers(ctx, args).get_state(args.sticker_id, args.state_id).raw)


def cmd_stickers_states_create(ctx: Context, args: argparse.Namespace) -> None:
    """Create a sticker state."""
    require(args, "name")
    ops = _stickers(ctx, args)
    result = ops.create_state(args.sticker_id, args.name)
    if ctx.output_json:
        json_output(result)
    else:
        print(f"{ops.kind.capitalize()} state created: id={result['id']}")


def cmd_stickers_states_update(ctx: Context, args: argparse.Namespace) -> None:
    """Rename a sticker state."""
    ops = _stickers(ctx, args)
    result = ops.update_state(args.sticker_id, args.state_id, name=args.name)
    if ctx.output_json and result is not None:
        json_output(result)
    else:
        print(f"{ops.kind.capitalize()} state updated: id={args.state_id}")


# =============================================================================
# CRM Commands
# =============================================================================


def cmd_crm_contact_persons_create(ctx: Context, args: argparse.Namespace) -> None:
    """Create a contact person in a CRM project."""
    require(args, "title", "project_id")
    fields = {
        "email": args.email,
        "phone": args.phone,
        "address": args.address,
        "position": args.position,
        "additionalPhone": args.additional_phone,
    }
    result = ctx.client().crm.create_contact_person(args.title, args.project_id, fields)
    if ctx.output_json:
        json_output(result)
    else:
        print(f"Contact person created: id={result['id']}")


def cmd_crm_contacts_by_external_id(ctx: Context, args: argparse.Namespace) -> None:
    """Find a contact by messenger provider and chat ID."""
    require(args, "provider", "chat_id")
    result = ctx.client().crm.find_by_external_id(args.provider, args.chat_id)
    if not ctx.output_json and result is None:
        print("No contact found")
        return
    ctx.render_item(result)


# =============================================================================
# Main CLI
# =============================================================================


def _common_flags() -> argparse.ArgumentParser:
    """Global flags repeated on every leaf so they work after the subcommand too."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", "-c", default=argparse.SUPPRESS, help="Path to config file")
    common.add_argument("--json", action="store_true", default=argparse.SUPPRESS, help="Output as JSON")
    return common


COMMON = _common_flags()


def _group(subparsers: Any, name: str, help_text: str) -> Any:
    """Add a command group that prints its help when called without a subcommand."""
    group = subparsers.add_parser(name, help=help_text, parents=[COMMON])
    group.set_defaults(func=lambda _c, _a: group.print_help())
    return group.add_subparsers(title="commands", metavar="<command>")


def _leaf(subparsers: Any, name: str, help_text: str, func: Callable[..., None]) -> argparse.ArgumentParser:
    leaf = subparsers.add_parser(name, help=help_text, parents=[COMMON])
    leaf.set_defaults(func=func)
    return leaf


def _add_paging(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Max items to return")
    parser.add_argument("--offset", type=int, default=0, help="Offset for pagination")


def _add_credentials(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--email", required=True, help="Account email")
    parser.add_argument("--password", required=True, help="Account password")
    parser.add_argument("--base-url", help="API host (default: from config, else production)")


def _add_sticker_commands(subparsers: Any, name: str, kind: str, label: str) -> None:
    """Register list/get/create/update and states/* for one sticker kind."""
    stickers = _group(subparsers, name, f"{label} stickers")

    s_list = _leaf(stickers, "list", f"List {label.lower()} stickers", cmd_stickers_list)
    s_list.add_argument("--include-deleted", action="store_true", help="Include deleted stickers")

    s_get = _leaf(stickers, "get", f"Get {label.lower()} sticker by ID", cmd_stickers_get)
    s_get.add_argument("id", help="Sticker ID")

    s_create = _leaf(stickers, "create", f"Create a {label.lower()} sticker", cmd_stickers_create)
    s_create.add_argument("--name", required=True, help="Sticker name")

    s_update = _leaf(stickers, "update", f"Update a {label.lower()} sticker", cmd_stickers_update)
    s_update.add_argument("id", help="Sticker ID")
    s_update.add_argument("--name", help="Sticker name")

    states = _group(stickers, "states", f"{label} sticker states")

    st_list = _leaf(states, "list", "List states of a sticker", cmd_stickers_states_list)
    st_list.add_argument("sticker_id", help="Sticker ID")

    st_get = _leaf(states, "get", "Get a sticker state by ID", cmd_stickers_states_get)
    st_get.add_argument("sticker_id", help="Sticker ID")
    st_get.add_argument("state_id", help="State ID")

    st_create = _leaf(states, "create", "Create a state for a sticker", cmd_stickers_states_create)
    st_create.add_argument("sticker_id", help="Sticker ID")
    st_create.add_argument("--name", required=True, help="State name")

    st_update = _leaf(states, "update", "Update a sticker state", cmd_stickers_states_update)
    st_update.add_argument("sticker_id", help="Sticker ID")
    st_update.add_argument("state_id", help="State ID")
    st_update.add_argument("--name", help="State name")

    for leaf in (s_list, s_get, s_create, s_update, st_list, st_get, st_create, st_update):
        leaf.set_defaults(sticker_kind=kind)


def create_parser() -> argparse.ArgumentParser:  # noqa: PLR0915
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="yougile",
        description="YouGile CLI - tasks, projects, boards, users, chats and CRM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output Modes:
  default:  Tables for lists, indented JSON for single objects
  --json:   Raw API JSON on one line

Examples:
  yougile auth login --email me@example.com --password '...'
  yougile projects list --title Roadmap
  yougile tasks create --title "Write release notes" --column-id <column_id>
  yougile --json tasks list --column-id <column_id> | jq '.content[].id'
""",
    )
    parser.add_argument(
        "--config",
        "-c",
        help="Path to config file (default: $YOUGILE_CONFIG or ~/.config/yougile-cli/config.yaml)",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log HTTP requests to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", title="commands", metavar="<command>")

    # ========== Config ==========
    config = _group(subparsers, "config", "Manage config file")
    _leaf(config, "path", "Print path to config file", cmd_config_path)
    _leaf(config, "show", "Show current config (api_key masked in human output)", cmd_config_show)

    # ========== Auth ==========
    auth = _group(subparsers, "auth", "Authentication and API keys")

    a_login = _leaf(auth, "login", "Log in with email and password, save API key to config", cmd_auth_login)
    _add_credentials(a_login)
    a_login.add_argument("--company-id", help="Company to log into (default: first company)")

    a_companies = _leaf(auth, "companies", "List companies (requires email and password)", cmd_auth_companies)
    _add_credentials(a_companies)
    _add_paging(a_companies)

    keys = _group(auth, "keys", "Manage API keys")

    k_list = _leaf(keys, "list", "List API keys (requires email and password)", cmd_auth_keys_list)
    _add_credentials(k_list)
    k_list.add_argument("--company-id", help="Filter by company ID")

    k_create = _leaf(keys, "create", "Create an API key (requires email, password, company-id)", cmd_auth_keys_create)
    _add_credentials(k_create)
    k_create.add_argument("--company-id", required=True, help="Company ID")

    k_delete = _leaf(keys, "delete", "Delete an API key by key value", cmd_auth_keys_delete)
    k_delete.add_argument("key", help="API key")
    k_delete.add_argument("--base-url", help="API host (default: from config, else production)")

    # ========== Company ==========
    company = _group(subparsers, "company", "Company details")
    _leaf(company, "get", "Get current company details", cmd_company_get)

    # ========== Users ==========
    users = _group(subparsers, "users", "Manage users")

    u_list = _leaf(users, "list", "List users", cmd_users_list)
    _add_paging(u_list)
    u_list.add_argument("--email", help="Filter by email")
    u_list.add_argument("--project-id", help="Filter by project ID")

    u_get = _leaf(users, "get", "Get user by ID", cmd_users_get)
    u_get.add_argument("id", help="User ID")

    # ========== Projects ==========
    projects = _group(subparsers, "projects", "Manage projects")

    p_list = _leaf(projects, "list", "List projects", cmd_projects_list)
    _add_paging(p_list)
    p_list.add_argument("--title", help="Filter by title")

    p_get = _leaf(projects, "get", "Get project by ID", cmd_projects_get)
    p_get.add_argument("id", help="Project ID")

    # ========== Boards ==========
    boards = _group(subparsers, "boards", "Manage boards")

    b_list = _leaf(boards, "list", "List boards", cmd_boards_list)
    _add_paging(b_list)
    b_list.add_argument("--title", help="Filter by title")
    b_list.add_argument("--project-id", help="Filter by project ID")

    b_get = _leaf(boards, "get", "Get board by ID", cmd_boards_get)
    b_get.add_argument("id", help="Board ID")

    # ========== Columns ==========
    columns = _group(subparsers, "columns", "Manage columns")

    c_list = _leaf(columns, "list", "List columns", cmd_columns_list)
    _add_paging(c_list)
    c_list.add_argument("--title", help="Filter by title")
    c_list.add_argument("--board-id", help="Filter by board ID")

    c_get = _leaf(columns, "get", "Get column by ID", cmd_columns_get)
    c_get.add_argument("id", help="Column ID")

    # ========== Tasks ==========
    tasks = _group(subparsers, "tasks", "Manage tasks")

    t_list = _leaf(tasks, "list", "List tasks", cmd_tasks_list)
    _add_paging(t_list)
    t_list.add_argument("--title", help="Filter by title")
    t_list.add_argument("--column-id", help="Filter by column ID")

    t_get = _leaf(tasks, "get", "Get task by ID", cmd_tasks_get)
    t_get.add_argument("id", help="Task ID")

    t_create = _leaf(tasks, "create", "Create a task", cmd_tasks_create)
    t_create.add_argument("--title", required=True, help="Task title")
    t_create.add_argument("--column-id", help="Column ID")

    t_update = _leaf(tasks, "update", "Update a task", cmd_tasks_update)
    t_update.add_argument("id", help="Task ID")
    t_update.add_argument("--title", help="Task title")
    t_update.add_argument("--column-id", help="Column ID (move task to another column)")

    subscribers = _group(tasks, "chat-subscribers", "Task chat subscribers")

    ts_get = _leaf(subscribers, "get", "Get task chat subscribers", cmd_tasks_subscribers_get)
    ts_get.add_argument("task_id", help="Task ID")

    ts_update = _leaf(subscribers, "update", "Update task chat subscribers", cmd_tasks_subscribers_update)
    ts_update.add_argument("task_id", help="Task ID")
    ts_update.add_argument("--user-ids", required=True, help="Comma-separated list of user IDs")

    # ========== Departments ==========
    departments = _group(subparsers, "departments", "Manage departments")

    d_list = _leaf(departments, "list", "List departments", cmd_departments_list)
    _add_paging(d_list)
    d_list.add_argument("--title", help="Filter by title")
    d_list.add_argument("--parent-id", help="Filter by parent department ID")

    d_get = _leaf(departments, "get", "Get department by ID", cmd_departments_get)
    d_get.add_argument("id", help="Department ID")

    # ========== Webhooks ==========
    webhooks = _group(subparsers, "webhooks", "Manage webhooks")
    w_list = _leaf(webhooks, "list", "List webhooks", cmd_webhooks_list)
    w_list.add_argument("--include-deleted", action="store_true", help="Include deleted webhooks")

    # ========== Files ==========
    files = _group(subparsers, "files", "File operations")
    f_upload = _leaf(files, "upload", "Upload a file", cmd_files_upload)
    f_upload.add_argument("file", help="Path to the file")

    # ========== Chats ==========
    chats = _group(subparsers, "chats", "Group chats and messages")

    ch_list = _leaf(chats, "list", "List group chats", cmd_chats_list)
    _add_paging(ch_list)
    ch_list.add_argument("--title", help="Filter by title")

    ch_get = _leaf(chats, "get", "Get group chat by ID", cmd_chats_get)
    ch_get.add_argument("id", help="Chat ID")

    messages = _group(chats, "messages", "Chat messages")

    m_list = _leaf(messages, "list", "List messages in a chat", cmd_chats_messages_list)
    m_list.add_argument("chat_id", help="Chat ID")
    _add_paging(m_list)

    m_send = _leaf(messages, "send", "Send a message to a chat", cmd_chats_messages_send)
    m_send.add_argument("chat_id", help="Chat ID")
    m_send.add_argument("--text", required=True, help="Message text")

    # ========== Stickers ==========
    stickers = _group(subparsers, "stickers", "String and sprint stickers")
    _add_sticker_commands(stickers, "string", "string_stickers", "String")
    _add_sticker_commands(stickers, "sprint", "sprint_stickers", "Sprint")

    # ========== CRM ==========
    crm = _group(subparsers, "crm", "CRM contacts and contact persons")

    persons = _group(crm, "contact-persons", "Contact persons")
    cp_create = _leaf(persons, "create", "Create a contact person in a CRM project", cmd_crm_contact_persons_create)
    cp_create.add_argument("--title", required=True, help="Contact name/title")
    cp_create.add_argument("--project-id", required=True, help="CRM project ID")
    cp_create.add_argument("--email", help="Email")
    cp_create.add_argument("--phone", help="Phone")
    cp_create.add_argument("--address", help="Address")
    cp_create.add_argument("--position", help="Position")
    cp_create.add_argument("--additional-phone", help="Additional phone")

    contacts = _group(crm, "contacts", "Contacts")
    ct_find = _leaf(
        contacts,
        "by-external-id",
        "Find contact by external integration (provider and chat ID)",
        cmd_crm_contacts_by_external_id,
    )
    ct_find.add_argument("--provider", required=True, help="External integration provider")
    ct_find.add_argument("--chat-id", required=True, help="Chat ID in the external messenger")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    ctx = Context(config_flag=args.config, output_json=args.json)

    # Run command (all groups have default funcs that print help)
    try:
        args.func(ctx, args)
    except CLIError as e:
        error_output(e, as_json=ctx.output_json)


if __name__ == "__main__":
    main()
