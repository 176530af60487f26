"""
Solana 代币扫描 - Web 界面
启动命令: streamlit run app.py
"""

import logging
import sys
import importlib

import streamlit as st
import pandas as pd

# 强制重新加载模块，避免缓存问题
for mod_name in ['services.scanner', 'services.lookup', 'services.safety', 'services.dexscreener', 'services.rugcheck']:
    if mod_name in sys.modules:
        importlib.reload(sys.modules[mod_name])

from config import LOG_LEVEL
from database import DatabaseManager
from services.auth import default_policy
from services.errors import ScanFailedError, ScanInProgressError, TokenLookupError
from services.lookup import TokenLookup
from services.scanner import TokenScanner

# 配置日志
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

PAGE_SIZE = 50

# ==================== 浅色主题 CSS ====================
LIGHT_THEME_CSS = """
<style>
    .stApp {
        font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
        background: #f5f7fa;
    }

    section[data-testid="stSidebar"] {
        background: #ffffff !important;
        border-right: 1px solid #e2e8f0;
    }

    .stDataFrame {
        background: #ffffff;
        border-radius: 10px;
        border: 1px solid #e2e8f0;
    }

    .stButton > button[kind="primary"] {
        background: linear-gradient(135deg, #8b5cf6 0%, #14b8a6 100%);
        color: white;
        border: none;
        font-weight: 600;
        border-radius: 8px;
        width: 100%;
    }

    .score-badge { font-size: 2rem; font-weight: 700; }
    .score-safe { color: #16a34a; }
    .score-caution { color: #d97706; }
    .score-risk { color: #dc2626; }

    .empty-state {
        text-align: center;
        padding: 3rem 1.5rem;
        background: #ffffff;
        border-radius: 12px;
        border: 1px solid #e2e8f0;
    }

    .empty-state .title { font-size: 1.1rem; color: #334155; font-weight: 600; }
    .empty-state .desc { color: #94a3b8; font-size: 0.85rem; }

    #MainMenu { visibility: hidden; }
    footer { visibility: hidden; }
</style>
"""


def format_number(num) -> str:
    """格式化数字"""
    if num is None:
        return "-"
    num = float(num)
    if num >= 1_000_000_000:
        return f"${num / 1_000_000_000:.1f}B"
    if num >= 1_000_000:
        return f"${num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"${num / 1_000:.1f}K"
    return f"${num:.2f}"


def format_price(price) -> str:
    try:
        price = float(price)
    except (TypeError, ValueError):
        return "-"
    return f"${price:.8f}" if price < 0.01 else f"${price:.4f}"


def score_class(score: int) -> str:
    if score >= 75:
        return "score-safe"
    if score >= 50:
        return "score-caution"
    return "score-risk"


# 页面配置
st.set_page_config(
    page_title="Solana Token Scanner",
    page_icon="shield",
    layout="wide",
    initial_sidebar_state="expanded",
    menu_items=None,
)

# 注入 CSS
st.markdown(LIGHT_THEME_CSS, unsafe_allow_html=True)


@st.cache_resource
def get_db() -> DatabaseManager:
    return DatabaseManager()


@st.cache_resource
def get_scanner() -> TokenScanner:
    # 所有会话共用一个扫描器，保证同一时间只有一轮扫描
    return TokenScanner(db_manager=get_db())


def get_lookup() -> TokenLookup:
    return TokenLookup(db_manager=get_db())


def tokens_to_dataframe(tokens: list) -> pd.DataFrame:
    """转换为 DataFrame"""
    if not tokens:
        return pd.DataFrame()

    data = []
    for t in tokens:
        change = t.get("price_change_24h")
        data.append({
            "代币": t.get("token_symbol", "-"),
            "名称": t.get("token_name", "-"),
            "评分": t.get("safety_score", 0),
            "价格": format_price(t.get("current_price")),
            "24h": f"{change:+.2f}%" if change is not None else "-",
            "市值": format_number(t.get("market_cap")),
            "流动性": format_number(t.get("liquidity_usd")),
            "24h量": format_number(t.get("volume_24h")),
            "LP锁仓": "是" if t.get("liquidity_locked") else "否",
            "权限放弃": "是" if t.get("ownership_renounced") else "否",
            "上线时间": (t.get("launch_time") or "-")[:16].replace("T", " "),
            "合约": t.get("contract_address"),
        })

    return pd.DataFrame(data)


def logs_to_dataframe(logs: list) -> pd.DataFrame:
    if not logs:
        return pd.DataFrame()
    return pd.DataFrame([
        {
            "时间": (log.get("created_at") or "-")[:19].replace("T", " "),
            "类型": log.get("scan_type"),
            "扫描": log.get("tokens_scanned"),
            "通过": log.get("tokens_passed"),
            "失败": log.get("tokens_failed"),
            "错误": log.get("error_message") or "",
        }
        for log in logs
    ])


def render_lookup_result(result):
    token = result.token
    score = token.get("safety_score", 0)
    source = "数据库" if result.source == "database" else "实时评分"

    st.markdown(f"### {token.get('token_symbol')} · {token.get('token_name')}  \n来源: {source}")
    st.markdown(
        f'<div class="score-badge {score_class(score)}">{score}%</div>',
        unsafe_allow_html=True,
    )
    c1, c2, c3 = st.columns(3)
    c1.metric("价格", format_price(token.get("current_price")))
    c2.metric("流动性", format_number(token.get("liquidity_usd")))
    c3.metric("市值", format_number(token.get("market_cap")))

    for reason in token.get("safety_reasons") or []:
        st.success(reason)
    for warning in token.get("risk_warnings") or []:
        st.warning(warning)

    links = [
        f"[{label}]({token[key]})"
        for label, key in (
            ("Dexscreener", "dexscreener_url"),
            ("Solscan", "solscan_url"),
            ("RugCheck", "rugcheck_url"),
            ("Twitter", "twitter_url"),
            ("Telegram", "telegram_url"),
            ("Website", "website_url"),
        )
        if token.get(key)
    ]
    if links:
        st.markdown(" | ".join(links))


def main():
    db = get_db()
    policy = default_policy()

    # 侧边栏
    with st.sidebar:
        st.markdown("**代币查询**")
        address = st.text_input("合约地址", key="lookup_address")
        lookup_btn = st.button("🔍 查询", use_container_width=True)

        st.divider()

        st.markdown("**管理**")
        password = st.text_input("管理员密码", type="password", key="admin_password")
        is_admin = policy.check(password)
        scan_btn = st.button("立即扫描", type="primary", use_container_width=True, disabled=not is_admin)
        if password and not is_admin:
            st.caption("密码错误")

    # 查询
    if lookup_btn:
        with st.spinner("查询中..."):
            try:
                render_lookup_result(get_lookup().lookup(address))
            except TokenLookupError as e:
                st.error(str(e))
        st.divider()

    # 手动扫描
    if scan_btn and is_admin:
        with st.spinner("扫描中..."):
            try:
                result = get_scanner().run_scan("manual")
                st.success(f"完成! 扫描 {result.scanned} 个, 通过 {result.passed} 个, 失败 {result.failed} 个")
            except ScanInProgressError:
                st.info("已有扫描在运行")
            except ScanFailedError as e:
                st.error(f"扫描失败: {e}")

    # 已验证代币
    page = st.number_input("页码", min_value=1, value=1, step=1, key="page")
    listing = db.get_verified_tokens(int(page), PAGE_SIZE)
    st.caption(f"共 {listing['total']} 个已验证代币")

    if listing["tokens"]:
        st.dataframe(tokens_to_dataframe(listing["tokens"]), use_container_width=True, hide_index=True, height=450)
    else:
        st.markdown("""
            <div class="empty-state">
                <div class="title">暂无已验证代币</div>
                <div class="desc">等待下一轮扫描</div>
            </div>
        """, unsafe_allow_html=True)

    # 扫描记录
    st.markdown("**扫描记录**")
    logs = db.get_scan_logs(20)
    if logs:
        st.dataframe(logs_to_dataframe(logs), use_container_width=True, hide_index=True)

    if is_admin:
        st.markdown("**未通过代币**")
        failed = db.get_failed_tokens(50)
        if failed:
            st.dataframe(pd.DataFrame([
                {
                    "代币": f.get("token_symbol"),
                    "合约": f.get("contract_address"),
                    "原因": "; ".join(f.get("failure_reasons") or []),
                    "时间": (f.get("created_at") or "-")[:19].replace("T", " "),
                }
                for f in failed
            ]), use_container_width=True, hide_index=True)


if __name__ == "__main__":
    main()
