"""
Deadline service layer.

- scanner: periodic threshold / overdue notifications
- ledger: (item, threshold, recipient) dedup records
- extensions: deadline extension request / review workflow
- milestones: project milestone tracking
- queries: read-side overdue / upcoming / stats / calendar
"""
