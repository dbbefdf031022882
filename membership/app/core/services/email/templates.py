"""HTML bodies for the emails the registry sends."""

from html import escape


def _wrap(site_name: str, inner: str) -> str:
    return (
        "<html><body style=\"font-family: Arial, sans-serif;\">"
        f"{inner}"
        f"<p>Regards,<br/>{escape(site_name)}</p>"
        "</body></html>"
    )


class EmailTemplates:
    def __init__(self, site_name: str):
        self.site_name = site_name

    def referral_outcome(self, company: str | None, message: str) -> tuple[str, str]:
        subject = f"{self.site_name}: membership application update"
        body = _wrap(
            self.site_name,
            f"<p>Dear {escape(company or 'Applicant')},</p><p>{escape(message)}</p>",
        )
        return subject, body

    def registration_started(self, company: str | None) -> tuple[str, str]:
        subject = f"Welcome to {self.site_name}"
        body = _wrap(
            self.site_name,
            f"<p>Dear {escape(company or 'Applicant')},</p>"
            "<p>Your registration has been received. Your referees will be asked "
            "to confirm your application.</p>",
        )
        return subject, body

    def password_reset(self, link: str) -> tuple[str, str]:
        subject = f"{self.site_name}: password reset"
        body = _wrap(
            self.site_name,
            "<p>A password reset was requested for your account.</p>"
            f"<p><a href=\"{escape(link, quote=True)}\">Reset your password</a></p>"
            "<p>If you did not request this, ignore this email.</p>",
        )
        return subject, body

    def referee_alert(
        self, applicant_company: str | None, approve_url: str, reject_url: str
    ) -> tuple[str, str]:
        subject = f"{self.site_name}: referral request"
        body = _wrap(
            self.site_name,
            f"<p>{escape(applicant_company or 'An applicant')} has nominated you as a "
            "referee for membership.</p>"
            f"<p><a href=\"{escape(approve_url, quote=True)}\">APPROVE</a> | "
            f"<a href=\"{escape(reject_url, quote=True)}\">REJECT</a></p>",
        )
        return subject, body

    def referral_process_started(self, company: str | None) -> tuple[str, str]:
        subject = f"{self.site_name}: referees contacted"
        body = _wrap(
            self.site_name,
            f"<p>Dear {escape(company or 'Applicant')},</p>"
            "<p>Your referees have been contacted. You will be notified once they respond.</p>",
        )
        return subject, body
