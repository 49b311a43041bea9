from typing import Literal

TicketStatus = Literal["Unread", "Open", "With User", "In Progress", "Closed"]
TicketPriority = Literal["Low", "Medium", "High", "Critical"]
TicketType = Literal["bug", "feature", "support", "other"]
TicketSortField = Literal["status", "priority", "created_at", "updated_at", "last_update"]
SortOrder = Literal["asc", "desc"]

AgentRole = Literal["admin", "agent", "manager"]
AuthMethod = Literal["password", "microsoft", "both"]

LogicalOperator = Literal["AND", "OR"]
ConditionType = Literal[
    "DESCRIPTION",
    "TICKET_BODY",
    "USER",
    "USER_DOMAIN",
    "INBOX",
    "AGENT",
    "COMPANY",
    "PRIORITY",
    "CATEGORY",
]
ConditionOperator = Literal["eql", "neql", "con", "ncon"]
ActionType = Literal[
    "SET_AGENT",
    "SET_PRIORITY",
    "SET_STATUS",
    "SET_TEAM",
    "SET_CATEGORY",
    "ALSO_NOTIFY",
]

MentionType = Literal["agent", "user"]
SenderType = Literal["agent", "user"]
NotificationChannel = Literal["teams"]
LogLevel = Literal["debug", "info", "warning", "error", "critical"]
ActivitySourceType = Literal["Workspace", "Ticket", "Team", "Company", "User", "Comment"]
ActivityStatus = Literal["unread", "read"]
