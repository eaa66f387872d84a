# ============================================================
# 🌐 ANS Lookup Dashboard
# AllDomains name accounts: domain -> record, name account -> domain
# ============================================================

import base58
import pandas as pd
import streamlit as st
from solders.pubkey import Pubkey

from config import load_config
from errors import AnsError
from tld_parser import TldParser
from validity import evaluate


# ============================================================
# Helper functions
# ============================================================
def detect_input_type(value: str):
    value = value.strip()
    try:
        if len(base58.b58decode(value)) == 32:
            return "address"
    except ValueError:
        pass
    if "." in value:
        return "domain"
    return None


def format_key(key):
    return str(key) if key is not None else "—"


def record_rows(record, role=None, validity=None):
    rows = [
        {"欄位": "Parent", "值": format_key(record.parent_name)},
        {"欄位": "Owner", "值": format_key(record.owner)},
        {"欄位": "Class", "值": format_key(record.name_class)},
        {"欄位": "Expires at", "值": str(record.expires_at) if record.expires_at else "never"},
    ]
    if role is not None:
        rows.append({"欄位": "Role", "值": str(role)})
    if validity is not None:
        rows.append({"欄位": "Expired", "值": "yes" if validity.is_expired else "no"})
        rows.append({"欄位": "Effective owner", "值": format_key(validity.effective_owner)})
    return rows


def render_record(record, role=None, validity=None):
    df = pd.DataFrame(record_rows(record, role, validity))
    st.markdown("### 📇 Name record")
    st.dataframe(df)


# ============================================================
# Streamlit UI
# ============================================================
def main():
    st.set_page_config(page_title="ANS Lookup", layout="wide")
    st.title("🌐 ANS 網域查詢")

    value = st.text_input("網域 (miester.abc) 或 name account 地址", "")
    if not st.button("開始查詢"):
        return

    value = value.strip()
    input_type = detect_input_type(value)
    if not input_type:
        st.error("❌ 無法判斷輸入類型。")
        st.stop()
        return

    try:
        parser = TldParser(config=load_config())
        if input_type == "domain":
            st.info(f"🔍 正在解析 {value} ...")
            lookup = parser.get_name_record(value)
            st.success(f"✅ {lookup.resolved.domain} -> {lookup.resolved.name_account}")
            render_record(lookup.record, lookup.role, lookup.validity)
        else:
            name_account = Pubkey.from_string(value)
            st.info("🔍 正在反查 name account ...")
            domain = parser.reverse_lookup_name_account(name_account)
            record = parser.get_name_record_from_name_account(name_account)
            st.success(f"✅ {name_account} -> {domain}")
            render_record(record, parser.resolver.classify(record), evaluate(record))
    except AnsError as e:
        st.error(f"❌ 查詢失敗：{e}")


if __name__ == "__main__":
    main()
