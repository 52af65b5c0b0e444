"""リポジトリのルートを sys.path に追加する（pytest 実行時の import 用）"""
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))
