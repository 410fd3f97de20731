from enum import Enum


class BookStatus(str, Enum):
    READ = "READ"
    UNREAD = "UNREAD"

    @property
    def label(self):
        names = {
            BookStatus.READ: "✅ Read",
            BookStatus.UNREAD: "📖 Unread",
        }
        return names[self]
