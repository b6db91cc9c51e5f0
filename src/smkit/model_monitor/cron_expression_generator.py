"""Schedule expressions accepted by CreateMonitoringSchedule."""


class CronExpressionGenerator(object):
    """Generates cron expression strings for the SageMaker Model Monitoring Schedule API."""

    @staticmethod
    def hourly() -> str:
        """Generates hourly cron expression that denotes that a job runs at the top of every hour."""
        return "cron(0 * ? * * *)"

    @staticmethod
    def daily(hour: int = 0) -> str:
        """Generates daily cron expression that denotes that a job runs once a day at ``hour``.

        Args:
            hour (int): The hour in HH24 format (UTC) to run the job at, on a daily schedule.
        """
        return f"cron(0 {hour} ? * * *)"

    @staticmethod
    def daily_every_x_hours(hour_interval: int, starting_hour: int = 0) -> str:
        """Generates "daily every x hours" cron expression.

        That denotes that a job runs every day at the specified hour, and then every x hours, as specified in
        hour_interval.

        Args:
            hour_interval (int): The hour interval to run the job at.
            starting_hour (int): The hour at which to begin in HH24 format (UTC).
        """
        return f"cron(0 {starting_hour}/{hour_interval} ? * * *)"
