"""User-facing Slack texts."""

CLEANUP_COMPLETE_MESSAGE = "Cleanup complete. :white_check_mark:"
NO_SUBSCRIPTIONS_MESSAGE = "You are not subscribed to any events."

INCOMPLETE_CHECKLIST_REMINDER = (
    ":warning: release checklist is not complete for <{pr_url}|your PR>, "
    "please revisit it and make sure all post-release steps are performed :pray:"
)


def unknown_user_message(app_name: str) -> str:
    return f"I don't know you :crycat:. Type `/{app_name} ghuser <username>` to set your GitHub username."


def unknown_command_message(app_name: str) -> str:
    return f"I don't understand that :crycat:. Type `/{app_name} help` to see the list of supported commands."


def username_set_message(app_name: str, username: str) -> str:
    return (
        f"Your GitHub username is now set to `{username}`. "
        f"Use `/{app_name} subscribe <event>` to receive notifications about your PRs."
    )


def help_message(app_name: str, display_name: str) -> str:
    """Help text listing every slash command."""
    return f"""
Hi there! I'm {display_name}, a bot that adds emojis to PRs when they are merged or closed. \
I can also notify you about those events via direct messages.

Supported commands:
`/{app_name} ghuser` - returns your GitHub username
`/{app_name} ghuser <username>` - sets your GitHub username
`/{app_name} subscribe` - enables all notifications about your PRs via DMs
`/{app_name} subscribe <event>` - get notified only about specified `<event>` which is one of
 • `approved`,
 • `created`,
 • `commented`,
 • `changes-requested`,
 • `submitted`,
 • `merged`,
 • `closed`,
 • `all`
 • or a comma-separated list of those
`/{app_name} unsubscribe` - disables all notifications about your PRs via DMs
`/{app_name} unsubscribe <event>` - disables notifications about your PRs via DMs for the specified event
`/{app_name} subscriptions` - shows your current PR event subscriptions
`/{app_name} cleanup` - deletes all stored PRs *from all users* :warning:
`/{app_name} cleanup <days>` - deletes stored PRs older than the specified number of days *from all users* :warning:
`/{app_name} help` - shows this message
"""
