from sosach.constants.messages import ApiErrors


class NotificationNotFoundException(Exception):
    def __init__(self, notification_id: str):
        self.message = ApiErrors.NOTIFICATION_NOT_FOUND.format(notification_id)
        super().__init__(self.message)


class ReminderDeliveryException(Exception):
    def __init__(self, channel: str, detail: str):
        self.message = ApiErrors.REMINDER_DELIVERY_FAILED.format(channel, detail)
        super().__init__(self.message)
