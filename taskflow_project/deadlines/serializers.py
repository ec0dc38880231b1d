"""
Plain dict renderings for JsonResponse (DjangoJSONEncoder handles dates).
"""


def user_summary(user):
    if user is None:
        return None
    return {
        "id": user.pk,
        "name": user.display_name,
        "email": user.email,
    }


def extension_data(extension):
    return {
        "id": extension.pk,
        "itemType": "task" if extension.task_id else "project",
        "itemId": extension.task_id or extension.project_id,
        "requestedBy": extension.requested_by_id,
        "requestedAt": extension.requested_at,
        "newDeadline": extension.new_deadline,
        "reason": extension.reason,
        "status": extension.status,
        "reviewedBy": extension.reviewed_by_id,
        "reviewedAt": extension.reviewed_at,
    }


def milestone_data(milestone):
    return {
        "id": milestone.pk,
        "projectId": milestone.project_id,
        "title": milestone.title,
        "description": milestone.description,
        "dueDate": milestone.due_date,
        "completed": milestone.completed,
        "completedAt": milestone.completed_at,
    }


def task_data(task, now=None):
    return {
        "id": task.pk,
        "title": task.title,
        "description": task.description,
        "status": task.status,
        "deadline": task.deadline,
        "isOverdue": task.is_overdue(now),
        "overdueDays": task.overdue_days(now),
        "assignedTo": user_summary(task.assignee),
        "projectId": task.project_id,
        "projectName": task.project.name if task.project_id else None,
        "estimatedHours": task.estimated_hours,
    }


def project_data(project, now=None):
    return {
        "id": project.pk,
        "name": project.name,
        "description": project.description,
        "status": project.status,
        "deadline": project.deadline,
        "isOverdue": project.is_overdue(now),
        "overdueDays": project.overdue_days(now),
        "members": [user_summary(member) for member in project.members.all()],
    }


def work_item_data(item, now=None):
    if item.item_type == "project":
        return project_data(item, now)
    return task_data(item, now)


def notification_data(notification):
    return {
        "id": notification.pk,
        "recipient": notification.recipient_id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.type,
        "priority": notification.priority,
        "read": notification.is_read,
        "readAt": notification.read_at,
        "relatedItem": {
            "type": notification.related_type or None,
            "id": notification.task_id or notification.project_id,
            "title": notification.related_title,
            "projectName": notification.related_project_name,
            **notification.related_data,
        },
        "emailSent": notification.email_sent,
        "emailSentAt": notification.email_sent_at,
        "createdAt": notification.created_at,
    }
