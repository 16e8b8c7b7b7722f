"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- dashboard: 요약/잔액/시계열/분포
- transactions: 거래 생성/수정/무효 처리/조회
- categories: 카테고리 관리
- students: 학생 관리 + 거래 내역서
- opening_balance: 기초 잔액
- reports: 전체 기간 리포트
"""
