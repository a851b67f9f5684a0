"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- ledger: 판매/조정/선물/비용/매입/응대 기록 및 조회
- purchases: NF-e 임포트
- closures: 일일 마감
- reports: DRE, 생산성, 자금 흐름, 월 마감 엑셀
- audit: 감사 로그
- users: 사용자 삭제
- config: 회계 설정
"""
