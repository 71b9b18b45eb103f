from imagehost.main import main

main()
