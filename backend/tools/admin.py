"""관리자 CLI 도구

사용법:
  python tools/admin.py stats                          서비스 현황 요약
  python tools/admin.py users                          사용자 목록
  python tools/admin.py users --role admin             역할별 필터
  python tools/admin.py user client@example.com        사용자 상세
  python tools/admin.py user client@example.com create <password> [name]   사용자 생성
  python tools/admin.py user client@example.com role admin     역할 변경
  python tools/admin.py user client@example.com password <pw>  비밀번호 변경
  python tools/admin.py user client@example.com disable        계정 비활성화
  python tools/admin.py user client@example.com enable         계정 활성화
  python tools/admin.py orders                         주문 목록
  python tools/admin.py orders --status REVIEW         상태별 필터
  python tools/admin.py payments --days 7              최근 7일 결제 내역
  python tools/admin.py settings                       결제 게이트 설정 조회
  python tools/admin.py settings client-portal off     결제 게이트 설정 변경
"""
import argparse
import asyncio
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

# DB 상대 경로가 올바르게 해석되도록 backend 디렉터리로 이동
BACKEND_DIR = Path(__file__).resolve().parent.parent
os.chdir(BACKEND_DIR)
sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select, func, desc

from config import settings
from domain.enums import OrderStatus, PaymentStatus, UserRole
from infrastructure.persistence.database import get_db_session, init_db
from infrastructure.persistence.models import User, Order, Payment
from infrastructure.persistence.repositories.settings_repository import SqlAlchemySettingsRepository
from infrastructure.auth.password_service import hash_password


# ==================== 유틸 ====================

def fmt_date(dt) -> str:
    if not dt:
        return "-"
    return dt.strftime("%Y-%m-%d %H:%M")


def fmt_amount(amount, currency: str = None) -> str:
    return f"{amount or 0:,.2f} {(currency or settings.PAYMENT_CURRENCY).upper()}"


def print_table(headers: list, rows: list, col_widths: list = None):
    """간단한 테이블 출력"""
    if not col_widths:
        col_widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
                      for i, h in enumerate(headers)]

    header_line = "".join(str(h).ljust(w) for h, w in zip(headers, col_widths))
    print(header_line)
    print("-" * len(header_line))
    for row in rows:
        print("".join(str(c).ljust(w) for c, w in zip(row, col_widths)))


async def _get_user(s, email: str) -> User:
    result = await s.execute(select(User).where(User.email == email.lower()))
    user = result.scalar_one_or_none()
    if not user:
        print(f"사용자를 찾을 수 없습니다: {email}")
        sys.exit(1)
    return user


# ==================== 명령어 ====================

async def cmd_stats():
    """서비스 현황 요약"""
    async with get_db_session() as s:
        total_users = (await s.execute(select(func.count(User.id)))).scalar()
        admin_users = (await s.execute(
            select(func.count(User.id)).where(User.role == UserRole.ADMIN)
        )).scalar()

        order_counts = {}
        for st in OrderStatus:
            order_counts[st.value] = (await s.execute(
                select(func.count(Order.id)).where(Order.status == st)
            )).scalar()

        payment_counts = {}
        for st in PaymentStatus:
            payment_counts[st.value] = (await s.execute(
                select(func.count(Payment.id)).where(Payment.status == st)
            )).scalar()

        month_start = datetime.utcnow().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        month_revenue = (await s.execute(
            select(func.sum(Payment.amount)).where(
                Payment.status == PaymentStatus.COMPLETED,
                Payment.paid_at >= month_start
            )
        )).scalar() or 0
        total_revenue = (await s.execute(
            select(func.sum(Payment.amount)).where(Payment.status == PaymentStatus.COMPLETED)
        )).scalar() or 0

    print("=== 서비스 현황 ===\n")

    print("[사용자]")
    print(f"  전체: {total_users}명 (관리자: {admin_users}명)")

    print("\n[주문]")
    for st, cnt in order_counts.items():
        print(f"  {st}: {cnt}건")

    print("\n[결제]")
    for st, cnt in payment_counts.items():
        print(f"  {st}: {cnt}건")

    print("\n[매출]")
    print(f"  이번 달: {fmt_amount(month_revenue)}")
    print(f"  전체: {fmt_amount(total_revenue)}")


async def cmd_users(role_filter: str = None):
    """사용자 목록"""
    async with get_db_session() as s:
        q = select(User).order_by(desc(User.created_at))
        if role_filter:
            q = q.where(User.role == UserRole(role_filter.upper()))
        users = (await s.execute(q)).scalars().all()

    if not users:
        print("사용자가 없습니다.")
        return

    headers = ["ID", "이메일", "이름", "역할", "회사", "상태", "가입일"]
    rows = [[u.id, u.email, u.name or "-", u.role.value, u.company or "-",
             "활성" if u.is_active else "비활성", fmt_date(u.created_at)] for u in users]
    print(f"사용자 {len(rows)}명:\n")
    print_table(headers, rows)


async def cmd_user_detail(email: str):
    """사용자 상세"""
    async with get_db_session() as s:
        user = await _get_user(s, email)
        orders = (await s.execute(
            select(Order).where(Order.client_id == user.id).order_by(desc(Order.created_at)).limit(5)
        )).scalars().all()
        payments = (await s.execute(
            select(Payment).where(Payment.user_id == user.id).order_by(desc(Payment.created_at)).limit(5)
        )).scalars().all()
        total_paid = (await s.execute(
            select(func.sum(Payment.amount)).where(
                Payment.user_id == user.id,
                Payment.status == PaymentStatus.COMPLETED
            )
        )).scalar() or 0

    print("=== 사용자 상세 ===\n")
    print(f"  ID:       {user.id}")
    print(f"  이메일:    {user.email}")
    print(f"  이름:      {user.name or '-'}")
    print(f"  전화:      {user.phone or '-'}")
    print(f"  회사:      {user.company or '-'}")
    print(f"  역할:      {user.role.value}")
    print(f"  상태:      {'활성' if user.is_active else '비활성'}")
    print(f"  가입일:    {fmt_date(user.created_at)}")
    print(f"  최근로그인: {fmt_date(user.last_login_at)}")
    print(f"  총 결제:   {fmt_amount(total_paid)}")

    if orders:
        print("\n[최근 주문]")
        for o in orders:
            print(f"  {fmt_date(o.created_at)}  {o.order_code:<10}  {o.status.value:<12}  {o.title[:30]}")

    if payments:
        print("\n[최근 결제]")
        for p in payments:
            print(f"  {fmt_date(p.created_at)}  {p.status.value:<10}  {fmt_amount(p.amount, p.currency):<16}  "
                  f"{p.service_name[:30]}")


async def cmd_user_create(email: str, password: str, name: str = None):
    """사용자 생성 (CLIENT)"""
    async with get_db_session() as s:
        result = await s.execute(select(User).where(User.email == email.lower()))
        if result.scalar_one_or_none():
            print(f"이미 존재하는 이메일입니다: {email}")
            sys.exit(1)

        s.add(User(
            email=email.lower(),
            password_hash=hash_password(password),
            name=name or email.split("@")[0],
            role=UserRole.CLIENT,
        ))

    print(f"사용자 생성 완료: {email}")


async def cmd_user_role(email: str, new_role: str):
    """역할 변경"""
    try:
        role = UserRole(new_role.upper())
    except ValueError:
        print(f"잘못된 역할: {new_role} (client/admin)")
        sys.exit(1)

    async with get_db_session() as s:
        user = await _get_user(s, email)
        old_role = user.role.value
        user.role = role

    print(f"{email}: {old_role} -> {role.value}")


async def cmd_user_password(email: str, new_password: str):
    """비밀번호 변경"""
    async with get_db_session() as s:
        user = await _get_user(s, email)
        user.password_hash = hash_password(new_password)

    print(f"{email}: 비밀번호 변경 완료")


async def cmd_user_toggle(email: str, enable: bool):
    """계정 활성/비활성"""
    async with get_db_session() as s:
        user = await _get_user(s, email)
        user.is_active = enable

    action = "활성화" if enable else "비활성화"
    print(f"{email}: {action} 완료")


async def cmd_orders(status_filter: str = None):
    """주문 목록"""
    async with get_db_session() as s:
        q = (select(Order, User.email)
             .join(User, Order.client_id == User.id)
             .order_by(desc(Order.created_at))
             .limit(100))
        if status_filter:
            q = q.where(Order.status == OrderStatus(status_filter.upper()))
        rows_raw = (await s.execute(q)).all()

    if not rows_raw:
        print("주문이 없습니다.")
        return

    headers = ["주문번호", "고객", "상태", "우선순위", "마감일", "제목", "수정일"]
    rows = [[o.order_code, email[:20], o.status.value, o.priority.value,
             o.due_date.isoformat() if o.due_date else "-", o.title[:25], fmt_date(o.updated_at)]
            for o, email in rows_raw]
    print(f"주문 {len(rows)}건:\n")
    print_table(headers, rows)


async def cmd_payments(days: int = 30):
    """결제 내역"""
    since = datetime.utcnow() - timedelta(days=days)
    async with get_db_session() as s:
        rows_raw = (await s.execute(
            select(Payment, User.email)
            .join(User, Payment.user_id == User.id)
            .where(Payment.created_at >= since)
            .order_by(desc(Payment.created_at))
            .limit(100)
        )).all()

    if not rows_raw:
        print(f"최근 {days}일간 결제 내역이 없습니다.")
        return

    headers = ["일시", "사용자", "서비스", "종류", "금액", "상태"]
    rows = [[fmt_date(pay.paid_at or pay.created_at), email[:20], pay.service_name[:25],
             pay.service_type, fmt_amount(pay.amount, pay.currency), pay.status.value]
            for pay, email in rows_raw]
    print(f"최근 {days}일 결제 내역 ({len(rows)}건):\n")
    print_table(headers, rows)


async def cmd_settings_show():
    """결제 게이트 설정 조회 (행이 없으면 결제 필요)"""
    async with get_db_session() as s:
        stored = await SqlAlchemySettingsRepository(s).get_many(settings.GATED_PAGES.values())

    headers = ["페이지", "설정 키", "결제 필요"]
    rows = [[page, key, "예" if stored.get(key, True) else "아니오"]
            for page, key in settings.GATED_PAGES.items()]
    print_table(headers, rows)


async def cmd_settings_set(page: str, value: str):
    """결제 게이트 설정 변경"""
    key = settings.GATED_PAGES.get(page)
    if key is None:
        print(f"알 수 없는 페이지: {page} ({', '.join(settings.GATED_PAGES)})")
        sys.exit(1)
    if value not in ("on", "off"):
        print(f"잘못된 값: {value} (on/off)")
        sys.exit(1)

    async with get_db_session() as s:
        await SqlAlchemySettingsRepository(s).set_bool(key, value == "on")

    print(f"{page}: 결제 필요 = {value}")


# ==================== 메인 ====================

def main():
    parser = argparse.ArgumentParser(
        description="스튜디오 포털 관리 CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
명령어:
  stats                              서비스 현황 요약
  users [--role client|admin]        사용자 목록
  user <email>                       사용자 상세
  user <email> create <password> [name]  사용자 생성
  user <email> role <client|admin>   역할 변경
  user <email> password <new_pw>     비밀번호 변경
  user <email> disable               계정 비활성화
  user <email> enable                계정 활성화
  orders [--status STATUS]           주문 목록
  payments [--days N]                결제 내역 (기본 30일)
  settings                           결제 게이트 설정 조회
  settings <page> <on|off>           결제 게이트 설정 변경
        """,
    )
    parser.add_argument("command", help="명령어")
    parser.add_argument("args", nargs="*", help="추가 인자")
    parser.add_argument("--role", help="역할 필터 (users 명령)")
    parser.add_argument("--status", help="상태 필터 (orders 명령)")
    parser.add_argument("--days", type=int, help="조회 기간 (일)")

    args = parser.parse_args()
    cmd = args.command

    # 테이블이 없는 새 DB에서도 동작하도록
    asyncio.run(init_db())

    if cmd == "stats":
        asyncio.run(cmd_stats())

    elif cmd == "users":
        asyncio.run(cmd_users(args.role))

    elif cmd == "user":
        if not args.args:
            parser.error("이메일을 지정해주세요: admin.py user <email>")
        email = args.args[0]
        if len(args.args) == 1:
            asyncio.run(cmd_user_detail(email))
        elif args.args[1] == "create":
            if len(args.args) < 3:
                parser.error("비밀번호를 지정해주세요: admin.py user <email> create <password> [name]")
            name = args.args[3] if len(args.args) > 3 else None
            asyncio.run(cmd_user_create(email, args.args[2], name))
        elif args.args[1] == "role":
            if len(args.args) < 3:
                parser.error("역할을 지정해주세요: admin.py user <email> role <client|admin>")
            asyncio.run(cmd_user_role(email, args.args[2]))
        elif args.args[1] == "password":
            if len(args.args) < 3:
                parser.error("비밀번호를 지정해주세요: admin.py user <email> password <new_pw>")
            asyncio.run(cmd_user_password(email, args.args[2]))
        elif args.args[1] == "disable":
            asyncio.run(cmd_user_toggle(email, False))
        elif args.args[1] == "enable":
            asyncio.run(cmd_user_toggle(email, True))
        else:
            parser.error(f"알 수 없는 하위 명령: {args.args[1]}")

    elif cmd == "orders":
        asyncio.run(cmd_orders(args.status))

    elif cmd == "payments":
        asyncio.run(cmd_payments(args.days or 30))

    elif cmd == "settings":
        if not args.args:
            asyncio.run(cmd_settings_show())
        elif len(args.args) == 2:
            asyncio.run(cmd_settings_set(args.args[0], args.args[1]))
        else:
            parser.error("사용법: admin.py settings [<page> <on|off>]")

    else:
        parser.error(f"알 수 없는 명령: {cmd}")


if __name__ == "__main__":
    main()
