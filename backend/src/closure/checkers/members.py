"""Members and invites closure checkers.

Neither blocks closure; both warn the owner about people who lose access.
"""

from uuid import UUID

from models.org import Org, OrgInvite, OrgMember
from models.user import User
from ..schemas import BlockerSeverity, ClosureCheckResult
from .base import BaseClosureChecker


class MembersClosureChecker(BaseClosureChecker):
    module_id = "members"
    module_name = "Участники"

    def check(self, organization_id: UUID) -> ClosureCheckResult:
        org = self.db.query(Org).filter(Org.id == organization_id).first()
        if not org:
            return self.build_result()

        rows = self.db.query(OrgMember, User).join(
            User, User.id == OrgMember.user_id
        ).filter(
            OrgMember.org_id == organization_id,
            OrgMember.status == "active",
            OrgMember.user_id != org.owner_id,
        ).order_by(OrgMember.created_at, OrgMember.id).all()

        blockers = [
            self.build_blocker(
                record_id=member.id,
                severity=BlockerSeverity.WARNING,
                type="data",
                title=f"Участник {user.name}",
                description=f"{user.email} потеряет доступ к организации",
                action_required="Предупредите участника о закрытии организации",
            )
            for member, user in rows
        ]

        return self.build_result(blockers=blockers)


class InvitesClosureChecker(BaseClosureChecker):
    module_id = "invites"
    module_name = "Приглашения"

    def check(self, organization_id: UUID) -> ClosureCheckResult:
        invites = self.db.query(OrgInvite).filter(
            OrgInvite.org_id == organization_id,
            OrgInvite.status == "pending",
        ).order_by(OrgInvite.created_at, OrgInvite.id).all()

        blockers = [
            self.build_blocker(
                record_id=invite.id,
                severity=BlockerSeverity.WARNING,
                type="data",
                title=f"Приглашение для {invite.email}",
                description="Приглашение ещё не принято",
                action_required="Приглашение будет отозвано",
            )
            for invite in invites
        ]

        return self.build_result(blockers=blockers)
